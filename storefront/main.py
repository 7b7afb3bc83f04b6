import os
import time
from dataclasses import dataclass
from typing import List, Optional

import httpx
from fastapi import FastAPI, APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.orm import sessionmaker

from .cart import Cart
from .catalog import Catalog, load_catalog
from .checkout import CheckoutSubmitter
from .config import Settings, configure_logging
from .db import init_db, make_engine, make_session_factory
from .errors import StorefrontError
from .metrics import REQS, LAT
from .schemas import CartItemIn, CartLineOut, CartOut, CartQtyIn, Customer, Order, Product
from .viewer import OrderViewer, SharedSecretVerifier
from .webhook import WebhookClient

APP_NAME = "storefront"
LISTEN_PORT = int(os.getenv("LISTEN_PORT", "8000"))


@dataclass
class Storefront:
    settings: Settings
    catalog: Catalog
    cart: Cart
    webhook: WebhookClient
    checkout: CheckoutSubmitter
    viewer: OrderViewer


def build_storefront(settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> Storefront:
    webhook = WebhookClient(settings, transport=transport)
    catalog = Catalog()
    cart = Cart(strict=settings.strict_cart)
    return Storefront(
        settings=settings,
        catalog=catalog,
        cart=cart,
        webhook=webhook,
        checkout=CheckoutSubmitter(cart, catalog, webhook),
        viewer=OrderViewer(SharedSecretVerifier(settings.admin_secret), webhook),
    )


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


def cart_summary(sf: Storefront) -> CartOut:
    lines = sf.cart.lines()
    total = sf.cart.total()
    # shipping is display-only, never part of the order total
    shipping = sf.settings.shipping_fee if lines else 0
    return CartOut(
        lines=[CartLineOut(product=line.product, qty=line.qty, subtotal=line.subtotal) for line in lines],
        count=sf.cart.count(),
        total=total,
        shipping=shipping,
        grand_total=total + shipping,
    )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    app = FastAPI(title=APP_NAME)
    app.state.storefront = build_storefront(settings, transport=transport)
    router = APIRouter(prefix=settings.api_prefix)

    def database_sessions() -> sessionmaker:
        if session_factory is not None:
            return session_factory
        engine = make_engine(settings)
        init_db(engine, settings.db_schema)
        return make_session_factory(engine)

    # ---- Startup: load products from the configured source ----
    @app.on_event("startup")
    def on_startup():
        sf: Storefront = app.state.storefront
        loaded = load_catalog(settings, webhook=sf.webhook, session_factory=database_sessions)
        sf.catalog.replace(loaded.list())

    # ---- Prometheus metrics ----
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        REQS.labels(APP_NAME, request.url.path, request.method, response.status_code).inc()
        LAT.labels(APP_NAME, request.url.path, request.method).observe(time.time() - start)
        return response

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "ok"

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # ---------- Catalog ----------
    @router.get("/products", response_model=List[Product])
    def list_products(sf: Storefront = Depends(get_storefront)):
        return sf.catalog.list()

    @router.get("/products/{pid}", response_model=Product)
    def get_product(pid: str, sf: Storefront = Depends(get_storefront)):
        return sf.catalog.get(pid)

    # ---------- Cart ----------
    @router.get("/cart", response_model=CartOut)
    def get_cart(sf: Storefront = Depends(get_storefront)):
        return cart_summary(sf)

    @router.post("/cart/items", response_model=CartOut)
    def add_item(payload: CartItemIn, sf: Storefront = Depends(get_storefront)):
        sf.cart.add(sf.catalog.get(payload.product_id), payload.qty)
        return cart_summary(sf)

    @router.put("/cart/items/{pid}", response_model=CartOut)
    def update_item(pid: str, payload: CartQtyIn, sf: Storefront = Depends(get_storefront)):
        sf.cart.update_qty(pid, payload.qty)
        return cart_summary(sf)

    @router.delete("/cart/items/{pid}", response_model=CartOut)
    def remove_item(pid: str, sf: Storefront = Depends(get_storefront)):
        sf.cart.remove(pid)
        return cart_summary(sf)

    @router.delete("/cart", status_code=204)
    def clear_cart(sf: Storefront = Depends(get_storefront)):
        sf.cart.clear()
        return Response(status_code=204)

    # ---------- Checkout ----------
    @router.post("/checkout", response_model=Order, status_code=201)
    def checkout(payload: Customer, sf: Storefront = Depends(get_storefront)):
        return sf.checkout.checkout(payload)

    # ---------- Admin ----------
    @router.get("/admin/orders", response_model=List[Order])
    def list_orders(request: Request, sf: Storefront = Depends(get_storefront)):
        return sf.viewer.fetch_orders(request.headers.get("X-Admin-Secret"))

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=LISTEN_PORT)
