"""
models.py — Data Models for the Liters Service

Pydantic models for the parts of Tienda Nube resources the service reads, and the
tagged union describing how a set-user-liters request was invoked.

Models:
    - Customer: Customer record, with the liters counter decoded from 'note'.
    - OrderProduct / OrderCustomer / Order: The fields of an order that are used.
    - DirectInvocation / WebhookInvocation: Resolved write-path input.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from .liters import parse_liters


def _as_optional_str(value):
    # Tienda Nube returns numeric ids; the service works with strings.
    if value is None:
        return None
    return str(value)


ResourceId = Annotated[Optional[str], BeforeValidator(_as_optional_str)]


class Customer(BaseModel):
    """
    A Tienda Nube customer.

    Attributes:
        id (str): Customer identifier.
        liters (int): Accumulated liters, decoded from the 'note' field.
            Empty, non-numeric or negative notes decode to 0.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: ResourceId = None
    liters: int = Field(0, alias="note")

    @field_validator("liters", mode="before")
    @classmethod
    def _decode_note(cls, value) -> int:
        return parse_liters(value)


class OrderProduct(BaseModel):
    model_config = ConfigDict(extra="ignore")

    quantity: int = 0

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value) -> int:
        # Quantities arrive as numbers or numeric strings ("2").
        return parse_liters(value)


class OrderCustomer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: ResourceId = None


class Order(BaseModel):
    """
    A Tienda Nube order.

    Attributes:
        id (str): Order identifier.
        customer (OrderCustomer | None): Purchasing customer, if any.
        products (List[OrderProduct]): Product lines. Only the first one is credited.
    """
    model_config = ConfigDict(extra="ignore")

    id: ResourceId = None
    customer: Optional[OrderCustomer] = None
    products: List[OrderProduct] = Field(default_factory=list)

    @field_validator("products", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @property
    def customer_id(self) -> Optional[str]:
        if self.customer is None or not self.customer.id:
            return None
        return self.customer.id


class DirectInvocation(BaseModel):
    """Called with an order id in the body; the customer is taken from the order."""
    kind: Literal["direct"] = "direct"
    order_id: str


class WebhookInvocation(BaseModel):
    """Called by the 'order/paid' webhook; the payload already names the customer."""
    kind: Literal["webhook"] = "webhook"
    order_id: str
    customer_id: Optional[str] = None


OrderInvocation = Union[DirectInvocation, WebhookInvocation]


class LitersUpdate(BaseModel):
    """Outcome of crediting an order to a customer."""
    order_id: str
    customer_id: str
    order_liters: int
    previous_liters: int
    new_liters: int
