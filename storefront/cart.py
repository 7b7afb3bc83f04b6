from typing import Dict, Iterable, List

from .errors import InsufficientStock, NotFound
from .schemas import CartLine, OrderItem, Product
from .store import Store


class Cart:
    """
    In-memory cart: one line per product id, qty always >= 1.

    Lenient by default, like the storefront it backs: adding beyond stock and
    updating an id that is not in the cart are accepted / ignored.
    With strict=True those raise InsufficientStock / NotFound.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.store: Store[Dict[str, CartLine]] = Store({})

    def add(self, product: Product, qty: int = 1) -> CartLine:
        if qty < 1:
            raise ValueError("qty must be >= 1")

        def apply(lines: Dict[str, CartLine]) -> Dict[str, CartLine]:
            lines = dict(lines)
            existing = lines.get(product.id)
            new_qty = qty + (existing.qty if existing else 0)
            if self.strict and new_qty > product.stock:
                raise InsufficientStock(f"only {product.stock} of {product.id} in stock")
            if existing:
                lines[product.id] = existing.model_copy(update={"qty": new_qty})
            else:
                lines[product.id] = CartLine(product=product.model_copy(), qty=qty)
            return lines

        return self.store.update(apply)[product.id]

    def update_qty(self, product_id: str, qty: int) -> None:
        if qty < 1:
            return

        def apply(lines: Dict[str, CartLine]) -> Dict[str, CartLine]:
            existing = lines.get(product_id)
            if existing is None:
                if self.strict:
                    raise NotFound(f"{product_id} is not in the cart")
                return lines
            if self.strict and qty > existing.product.stock:
                raise InsufficientStock(f"only {existing.product.stock} of {product_id} in stock")
            lines = dict(lines)
            lines[product_id] = existing.model_copy(update={"qty": qty})
            return lines

        self.store.update(apply)

    def remove(self, product_id: str) -> None:
        if product_id not in self.store.get():
            return
        self.store.update(lambda lines: {k: v for k, v in lines.items() if k != product_id})

    def take(self, items: Iterable[OrderItem]) -> None:
        """
        Take submitted quantities out of the cart. A line whose qty reaches 0 is
        removed; anything added after the order was built stays.
        """
        taken: Dict[str, int] = {}
        for item in items:
            taken[item.id] = taken.get(item.id, 0) + item.qty

        def apply(lines: Dict[str, CartLine]) -> Dict[str, CartLine]:
            remaining = {}
            for pid, line in lines.items():
                qty = line.qty - taken.get(pid, 0)
                if qty >= 1:
                    remaining[pid] = line if qty == line.qty else line.model_copy(update={"qty": qty})
            return remaining

        self.store.update(apply)

    def clear(self) -> None:
        self.store.set({})

    def lines(self) -> List[CartLine]:
        return list(self.store.get().values())

    def is_empty(self) -> bool:
        return not self.store.get()

    def count(self) -> int:
        return sum(line.qty for line in self.lines())

    def total(self) -> int:
        return sum(line.product.price * line.qty for line in self.lines())
