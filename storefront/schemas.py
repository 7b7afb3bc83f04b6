from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field
from pydantic import ConfigDict


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    type: str = ""
    price: int = Field(ge=0)
    stock: int = Field(ge=0, default=0)
    image_ref: str = Field(default="", alias="imageRef")


class CartLine(BaseModel):
    product: Product
    qty: int = Field(ge=1)

    @property
    def subtotal(self) -> int:
        return self.product.price * self.qty


# ---- Order wire contract (what the webhook receives and returns) ----

class OrderStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class Customer(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    note: str = ""


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    qty: int = Field(ge=1)
    price: int = Field(ge=0)


class Order(BaseModel):
    """
    A submitted order. Frozen; `items` is a tuple copied out of the cart,
    so later cart changes never reach it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    created_at: datetime = Field(alias="createdAt")
    customer: Customer
    items: Tuple[OrderItem, ...]
    total: int = Field(ge=0)
    status: OrderStatus = OrderStatus.PENDING

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class OrderList(BaseModel):
    orders: Optional[List[Order]] = None


class ProductList(BaseModel):
    products: Optional[List[Product]] = None


# ---- HTTP API payloads ----

class CartItemIn(BaseModel):
    product_id: str = Field(min_length=1)
    qty: int = Field(ge=1, default=1)


class CartQtyIn(BaseModel):
    # qty < 1 is accepted here and ignored by the cart
    qty: int


class CartLineOut(BaseModel):
    product: Product
    qty: int
    subtotal: int


class CartOut(BaseModel):
    lines: List[CartLineOut]
    count: int
    total: int
    shipping: int
    grand_total: int
