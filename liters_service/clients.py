"""
This module provides the communication client for the Tienda Nube REST API.

Only three endpoints are used:
- GET /orders/{id}
- GET /customers/{id}
- PUT /customers/{id}

The client encapsulates authentication headers, timeouts and the translation of
httpx failures into the service's own error types. The liters counter is encoded
into and decoded from the customer 'note' here and nowhere else.
"""

import logging
from typing import Optional

import httpx

from .config import LitersConfig
from .exceptions import UpstreamStatusError, UpstreamUnavailableError
from .models import Customer, Order

log = logging.getLogger(__name__)


class TiendaNubeClient:
    """
    Client for the Tienda Nube API (REST).
    Reads orders and customers and writes the customer's liters.
    """
    def __init__(self, config: LitersConfig, http_client: Optional[httpx.Client] = None):
        """
        Initializes the HTTP client with the configured base URL, headers and timeout.

        Args:
            config (LitersConfig): Service configuration.
            http_client (httpx.Client, optional): Pre-built client to use instead,
                e.g. one bound to a test transport. It is not closed by close().
        """
        self.headers = {
            "Content-Type": "application/json",
            "Authentication": f"bearer {config.auth_token}",
            "User-Agent": config.user_agent,
        }
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                base_url=config.api_url,
                timeout=httpx.Timeout(config.timeout_seconds),
            )
        self.client = http_client

    def close(self):
        """Closes the HTTP client session if it was created here."""
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, resource: str, payload: Optional[dict] = None):
        """
        Sends one request and returns the decoded JSON body (None if empty).

        Raises:
            UpstreamStatusError: If Tienda Nube answers with a 4xx/5xx status.
            UpstreamUnavailableError: On timeout or when the host cannot be reached.
        """
        try:
            response = self.client.request(method, path, json=payload, headers=self.headers)
            response.raise_for_status()
        except httpx.TimeoutException:
            log.error(f"Tienda Nube timeout on {method} {path}.")
            raise UpstreamUnavailableError(resource)
        except httpx.ConnectError as e:
            log.error(f"Tienda Nube unreachable on {method} {path}: {e}")
            raise UpstreamUnavailableError(resource)
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            log.warning(f"Tienda Nube answered {status_code} on {method} {path}.")
            raise UpstreamStatusError(resource, status_code) from e

        if not response.content.strip():
            return None
        return response.json()

    def fetch_order(self, order_id: str) -> Optional[Order]:
        """
        Reads an order.
        Args:
            order_id (str): Tienda Nube order id.
        Returns:
            Order | None: The order, or None if the API returned an empty body.
        """
        data = self._request("GET", f"/orders/{order_id}", "order")
        if not data:
            return None
        return Order.model_validate(data)

    def fetch_customer(self, customer_id: str) -> Optional[Customer]:
        """
        Reads a customer, decoding the liters stored in its note.
        Args:
            customer_id (str): Tienda Nube customer id.
        Returns:
            Customer | None: The customer, or None if the API returned an empty body.
        """
        data = self._request("GET", f"/customers/{customer_id}", "customer")
        if not data:
            return None
        return Customer.model_validate(data)

    def update_customer_liters(self, customer_id: str, new_liters: int) -> Customer:
        """
        Overwrites the customer's note with the new liters total.
        Args:
            customer_id (str): Tienda Nube customer id.
            new_liters (int): New total, stored as its string representation.
        Returns:
            Customer: The updated customer as returned by the API.
        """
        payload = {"id": customer_id, "note": str(new_liters)}
        data = self._request("PUT", f"/customers/{customer_id}", "customer", payload)
        if not data:
            # Some API versions answer an update without a body.
            return Customer(id=customer_id, liters=new_liters)
        return Customer.model_validate(data)
