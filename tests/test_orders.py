import re

import pytest
from pydantic import ValidationError

from storefront.errors import EmptyCartError
from storefront.orders import build_order, generate_order_id
from storefront.schemas import OrderStatus


def test_generated_id_is_prefix_and_six_digits():
    assert re.fullmatch(r"ORD\d{6}", generate_order_id())


def test_build_order_snapshots_cart(cart, shoe, jersey, customer, fixed_clock):
    cart.add(shoe)
    cart.add(jersey, 2)

    order = build_order(cart.lines(), customer, id_generator=lambda: "ORD000042", clock=fixed_clock)

    assert order.id == "ORD000042"
    assert order.created_at == fixed_clock()
    assert order.status is OrderStatus.PENDING
    assert order.total == 1597
    assert [(i.id, i.qty, i.price) for i in order.items] == [("shoe-01", 1, 599), ("jersey-01", 2, 499)]


def test_later_cart_changes_do_not_reach_order(cart, shoe, customer):
    cart.add(shoe, 2)
    order = build_order(cart.lines(), customer)

    cart.add(shoe, 5)
    cart.clear()

    assert order.items[0].qty == 2
    assert order.total == 1198


def test_build_order_does_not_touch_cart(cart, shoe, customer):
    cart.add(shoe)
    before = cart.store.get()

    build_order(cart.lines(), customer)

    assert cart.store.get() is before


def test_empty_cart_is_an_error(customer):
    with pytest.raises(EmptyCartError):
        build_order([], customer)


def test_order_is_frozen(cart, shoe, customer):
    cart.add(shoe)
    order = build_order(cart.lines(), customer)

    with pytest.raises(ValidationError):
        order.total = 0


def test_wire_format(cart, shoe, customer, fixed_clock):
    cart.add(shoe, 2)
    wire = build_order(cart.lines(), customer, id_generator=lambda: "ORD123456", clock=fixed_clock).to_wire()

    assert wire == {
        "id": "ORD123456",
        "createdAt": "2026-10-19T09:30:00Z",
        "customer": {"name": "Asha Rao", "phone": "9876543210", "address": "12 MG Road, Pune", "note": "ring twice"},
        "items": [{"id": "shoe-01", "title": "Street Runner Sneakers", "qty": 2, "price": 599}],
        "total": 1198,
        "status": "Pending",
    }
