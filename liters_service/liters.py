"""
liters.py — Liters Calculation

The customer's liters live upstream as the text of the 'note' field. This module
decodes that text into a non-negative integer and computes the new total after an
order has been paid.
"""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Customer, Order

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def parse_liters(value) -> int:
    """
    Decodes a liters value (usually a customer note) into a non-negative integer.

    Only the leading integer of a string is read, so "150" and "150 liters" both
    yield 150. Empty, non-numeric and negative values yield 0.

    Args:
        value: The raw value (str, int, float or None).

    Returns:
        int: The decoded amount, never negative.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        amount = int(value)
    else:
        match = _LEADING_INTEGER.match(str(value))
        if not match:
            return 0
        amount = int(match.group(1))
    return amount if amount > 0 else 0


def compute_order_liters(order: "Order", liters_per_product: int) -> int:
    """
    Returns the liters bought with an order.

    Only the first product line is credited: its quantity multiplied by
    liters_per_product. An order without product lines is worth 0 liters.
    """
    if not order.products:
        return 0
    return order.products[0].quantity * liters_per_product


def compute_updated_total(customer: "Customer", order_liters: int) -> int:
    """Adds the liters of an order to the customer's current total."""
    return customer.liters + order_liters
