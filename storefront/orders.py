import time
from datetime import datetime, timezone
from typing import Callable, Iterable

from .errors import EmptyCartError
from .schemas import CartLine, Customer, Order, OrderItem, OrderStatus

ORDER_ID_PREFIX = "ORD"
ORDER_ID_DIGITS = 6


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_id() -> str:
    """ORD + the low-order digits of the current time in ms. Not globally unique."""
    millis = time.time_ns() // 1_000_000
    return f"{ORDER_ID_PREFIX}{millis % 10 ** ORDER_ID_DIGITS:0{ORDER_ID_DIGITS}d}"


def build_order(
    lines: Iterable[CartLine],
    customer: Customer,
    id_generator: Callable[[], str] = generate_order_id,
    clock: Callable[[], datetime] = utcnow,
) -> Order:
    """
    Snapshot the cart into a Pending order. Does not touch the cart or catalog.
    Shipping is not part of the stored total.
    """
    items = tuple(
        OrderItem(id=line.product.id, title=line.product.title, qty=line.qty, price=line.product.price)
        for line in lines
    )
    if not items:
        raise EmptyCartError()
    return Order(
        id=id_generator(),
        created_at=clock(),
        customer=customer,
        items=items,
        total=sum(i.price * i.qty for i in items),
        status=OrderStatus.PENDING,
    )
