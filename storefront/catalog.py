import logging
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .db import session_scope
from .errors import NotFound, StorefrontError
from .schemas import OrderItem, Product
from .store import Store
from .webhook import WebhookClient
from . import models

logger = logging.getLogger(__name__)

STATIC_PRODUCTS: List[Product] = [
    Product(id="shoe-01", title="Street Runner Sneakers", type="shoes", price=599, stock=12, image_ref="img/shoe-01.jpg"),
    Product(id="shoe-02", title="Trail Grip Boots", type="shoes", price=899, stock=6, image_ref="img/shoe-02.jpg"),
    Product(id="jersey-01", title="Home Kit Jersey", type="jersey", price=499, stock=20, image_ref="img/jersey-01.jpg"),
    Product(id="jersey-02", title="Away Kit Jersey", type="jersey", price=499, stock=15, image_ref="img/jersey-02.jpg"),
    Product(id="cap-01", title="Classic Snapback", type="accessory", price=249, stock=30, image_ref="img/cap-01.jpg"),
    Product(id="bag-01", title="Gym Duffel Bag", type="accessory", price=799, stock=4, image_ref="img/bag-01.jpg"),
]


class Catalog:
    """Products keyed by id, held in a Store so stock changes can be observed."""

    def __init__(self, products: Iterable[Product] = ()):
        self.store: Store[Dict[str, Product]] = Store({p.id: p for p in products})

    def list(self) -> List[Product]:
        return list(self.store.get().values())

    def get(self, product_id: str) -> Product:
        p = self.store.get().get(product_id)
        if p is None:
            raise NotFound(f"unknown product {product_id}")
        return p

    def replace(self, products: Iterable[Product]) -> None:
        self.store.set({p.id: p for p in products})

    def decrement_stock(self, items: Iterable[OrderItem]) -> None:
        """Take each item's qty off its product, floored at 0. Unknown ids are skipped."""
        items = list(items)
        self.store.update(lambda current: _take_stock(current, items))


def _take_stock(products: Dict[str, Product], items: Iterable[OrderItem]) -> Dict[str, Product]:
    products = dict(products)
    for item in items:
        p = products.get(item.id)
        if p is None:
            continue
        products[p.id] = p.model_copy(update={"stock": max(0, p.stock - item.qty)})
    return products


# ---------- Catalog sources ----------

def load_database_products(session_factory: sessionmaker) -> List[Product]:
    with session_scope(session_factory) as s:
        rows = s.execute(select(models.Product).order_by(models.Product.id)).scalars().all()
        return [
            Product(id=r.id, title=r.title, type=r.type, price=r.price, stock=r.stock, image_ref=r.image_ref)
            for r in rows
        ]


def load_catalog(
    settings: Settings,
    webhook: Optional[WebhookClient] = None,
    session_factory: Optional[Callable[[], sessionmaker]] = None,
) -> Catalog:
    """
    Build the catalog from the configured source.
    External sources that fail fall back to the static list.
    """
    source = settings.catalog_source
    if source == "static":
        return Catalog(STATIC_PRODUCTS)

    try:
        if source == "webhook":
            if webhook is None:
                webhook = WebhookClient(settings)
            products = webhook.fetch_products()
        else:
            if session_factory is None:
                raise StorefrontError("no database configured")
            products = load_database_products(session_factory())
    except (StorefrontError, SQLAlchemyError) as e:
        logger.warning("Catalog source %s failed (%s); using static products", source, e)
        return Catalog(STATIC_PRODUCTS)

    if not products:
        logger.warning("Catalog source %s returned no products; using static products", source)
        return Catalog(STATIC_PRODUCTS)
    logger.info("Loaded %d products from %s", len(products), source)
    return Catalog(products)
