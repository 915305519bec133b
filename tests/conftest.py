import json

import pytest
from fastapi.testclient import TestClient

from liters_service.clients import TiendaNubeClient
from liters_service.config import LitersConfig
from liters_service.exceptions import ResourceNotFoundError
from liters_service.models import Customer, Order
from mock_services import mock_tienda_nube

API_URL = "http://tiendanube.test"


@pytest.fixture
def config():
    return LitersConfig(
        api_url=API_URL,
        auth_token="test-token",
        user_agent="Agua Marina (dev@aguamarina.test)",
        liters_per_product=5,
    )


class FakeTiendaNubeClient:
    """In-memory stand-in for TiendaNubeClient that records every call."""

    def __init__(self, orders=None, customers=None, errors=None):
        self.orders = orders or {}
        self.customers = customers or {}
        self.errors = errors or {}
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def _maybe_fail(self, call):
        if call in self.errors:
            raise self.errors[call]

    def fetch_order(self, order_id):
        self.calls.append(("GET", f"/orders/{order_id}"))
        self._maybe_fail("fetch_order")
        data = self.orders.get(order_id)
        return Order.model_validate(data) if data is not None else None

    def fetch_customer(self, customer_id):
        self.calls.append(("GET", f"/customers/{customer_id}"))
        self._maybe_fail("fetch_customer")
        data = self.customers.get(customer_id)
        return Customer.model_validate(data) if data is not None else None

    def update_customer_liters(self, customer_id, new_liters):
        self.calls.append(("PUT", f"/customers/{customer_id}", new_liters))
        self._maybe_fail("update_customer_liters")
        if customer_id not in self.customers:
            raise ResourceNotFoundError("customer")
        self.customers[customer_id]["note"] = str(new_liters)
        return Customer.model_validate(self.customers[customer_id])


@pytest.fixture
def fake_client():
    return FakeTiendaNubeClient(
        orders={
            "55": {"id": 55, "customer": {"id": 9}, "products": [{"quantity": 10}]},
            "60": {"id": 60, "customer": {"id": 9}, "products": []},
            "61": {"id": 61, "customer": None, "products": [{"quantity": 1}]},
        },
        customers={
            "9": {"id": 9, "note": "150"},
            "10": {"id": 10, "note": ""},
        },
    )


@pytest.fixture
def mock_upstream():
    """A TestClient bound to the mock Tienda Nube API, reset for every test."""
    mock_tienda_nube.reset_store()
    with TestClient(mock_tienda_nube.app, base_url=API_URL) as client:
        yield client


@pytest.fixture
def upstream_client(config, mock_upstream):
    return TiendaNubeClient(config, http_client=mock_upstream)


def rest_event(method="GET", query=None, path=None, body=None):
    """Builds an API Gateway REST (v1) proxy envelope."""
    return {
        "httpMethod": method,
        "queryStringParameters": query,
        "pathParameters": path,
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
    }


def http_event(method="GET", query=None, path=None, body=None):
    """Builds an API Gateway HTTP (v2) proxy envelope."""
    return {
        "requestContext": {"http": {"method": method}},
        "queryStringParameters": query,
        "pathParameters": path,
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
    }


def body_of(response):
    return json.loads(response["body"])
