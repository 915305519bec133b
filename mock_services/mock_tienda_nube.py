"""
mock_tienda_nube.py — Mock Implementation of the Tienda Nube API (REST)

This module provides a simulated Tienda Nube store for testing the liters handlers.
It exposes a small FastAPI application with in-memory orders and customers.

Simulation Scenarios:
    • Orders and customers that exist, with liters in the customer note
    • Unknown ids (HTTP 404)
    • Wrong or missing access token (HTTP 401)
    • Missing User-Agent header (HTTP 400, as required by the API policy)
    • Server error (HTTP 500) for ids starting with "error_"

Endpoints:
    GET /orders/{order_id}
    GET /customers/{customer_id}
    PUT /customers/{customer_id}

Port:
    Default: 8002 (HTTP)
"""

import copy
import logging
import os
from typing import Optional

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel

app = FastAPI(title="Mock Tienda Nube API")
logging.basicConfig(level=logging.INFO)

ACCESS_TOKEN = os.environ.get("MOCK_TIENDA_NUBE_TOKEN", "test-token")

INITIAL_CUSTOMERS = {
    "9": {"id": 9, "name": "Marina", "email": "marina@example.com", "note": "150"},
    "10": {"id": 10, "name": "Pablo", "email": "pablo@example.com", "note": ""},
    "11": {"id": 11, "name": "Lucia", "email": "lucia@example.com", "note": "sin litros"},
}

INITIAL_ORDERS = {
    "55": {"id": 55, "customer": {"id": 9}, "products": [{"product_id": 1, "quantity": "10"}]},
    "56": {"id": 56, "customer": {"id": 10}, "products": [{"product_id": 1, "quantity": 2}, {"product_id": 2, "quantity": 7}]},
    "57": {"id": 57, "customer": None, "products": [{"product_id": 1, "quantity": 1}]},
    "58": {"id": 58, "customer": {"id": 404}, "products": [{"product_id": 1, "quantity": 1}]},
    "59": {"id": 59, "customer": {"id": 11}, "products": []},
}

CUSTOMERS = {}
ORDERS = {}


def reset_store():
    """Restores the initial customers and orders."""
    CUSTOMERS.clear()
    CUSTOMERS.update(copy.deepcopy(INITIAL_CUSTOMERS))
    ORDERS.clear()
    ORDERS.update(copy.deepcopy(INITIAL_ORDERS))


reset_store()


class CustomerUpdate(BaseModel):
    """
    Represents a customer update payload. Only the fields the service sends.

    Attributes:
        id (str): Customer id, repeated in the body.
        note (str): New value of the note field.
    """
    id: Optional[str] = None
    note: Optional[str] = None


def _check_headers(authentication: Optional[str], user_agent: Optional[str]):
    if not user_agent:
        raise HTTPException(status_code=400, detail={"code": 400, "message": "Bad Request", "description": "User-Agent is required"})
    if authentication != f"bearer {ACCESS_TOKEN}":
        raise HTTPException(status_code=401, detail={"code": 401, "message": "Unauthorized", "description": "Invalid access token"})


def _lookup(store: dict, resource_id: str) -> dict:
    if resource_id.startswith("error_"):
        raise HTTPException(status_code=500, detail={"code": 500, "message": "Internal Server Error"})
    if resource_id not in store:
        raise HTTPException(status_code=404, detail={"code": 404, "message": "Not Found"})
    return store[resource_id]


@app.get("/orders/{order_id}")
def get_order(
        order_id: str,
        authentication: Optional[str] = Header(None),
        user_agent: Optional[str] = Header(None)
):
    _check_headers(authentication, user_agent)
    logging.info(f"[TN] Order {order_id} requested.")
    return _lookup(ORDERS, order_id)


@app.get("/customers/{customer_id}")
def get_customer(
        customer_id: str,
        authentication: Optional[str] = Header(None),
        user_agent: Optional[str] = Header(None)
):
    _check_headers(authentication, user_agent)
    logging.info(f"[TN] Customer {customer_id} requested.")
    return _lookup(CUSTOMERS, customer_id)


@app.put("/customers/{customer_id}")
def update_customer(
        customer_id: str,
        update: CustomerUpdate,
        authentication: Optional[str] = Header(None),
        user_agent: Optional[str] = Header(None)
):
    """
    Updates a customer's note.

    Returns:
        dict: The full updated customer record.

    Raises:
        HTTPException(404): If the customer does not exist.
    """
    _check_headers(authentication, user_agent)
    customer = _lookup(CUSTOMERS, customer_id)
    if update.note is not None:
        customer["note"] = update.note
    logging.info(f"[TN] Customer {customer_id} note set to {customer['note']!r}.")
    return customer


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8002)
