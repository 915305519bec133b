"""
workflow.py — Core Orchestration Logic for the Liters Handlers

This module contains the two request handlers of the service. Each handler
resolves its input, talks to Tienda Nube and turns the outcome into a response.

get-user-liters:
    1. Resolve the customer id (query → path → body)
    2. Read the customer from Tienda Nube
    3. Report the liters stored in the customer's note

set-user-liters:
    1. Resolve the order id (direct invocation or 'order/paid' webhook)
    2. Read the order and compute the liters bought (first product line only)
    3. Read the customer and add the order liters to the current total
    4. Write the new total back into the customer's note

The steps run strictly in this order. The update is a plain read-modify-write:
two concurrent invocations for the same customer can overwrite each other.
"""

import logging
from typing import Callable, Optional

from .clients import TiendaNubeClient
from .config import LitersConfig
from .exceptions import LitersError, MethodNotAllowedError, OrderWithoutCustomerError, ResourceNotFoundError
from .liters import compute_order_liters, compute_updated_total
from .models import LitersUpdate, OrderInvocation, WebhookInvocation
from .resolver import extract_method, resolve_customer_id, resolve_order_invocation
from .responses import (
    READ_METHODS,
    WRITE_METHODS,
    build_error_response,
    build_preflight_response,
    build_response,
    customer_liters_message,
    liters_updated_message,
)

log = logging.getLogger(__name__)

ClientFactory = Callable[[], TiendaNubeClient]


class _Handler:
    allowed_methods = ""

    def __init__(self, config: LitersConfig, client_factory: Optional[ClientFactory] = None):
        """
        Args:
            config (LitersConfig): Service configuration.
            client_factory (callable, optional): Returns a fresh Tienda Nube client
                for one invocation. Defaults to TiendaNubeClient(config).
        """
        self.config = config
        self.client_factory = client_factory or (lambda: TiendaNubeClient(config))

    def __call__(self, event: dict, context=None) -> dict:
        return self.handle(event)

    def handle(self, event: dict) -> dict:
        raise NotImplementedError

    def _error(self, error: LitersError) -> dict:
        return build_error_response(error.status_code, error.message, self.allowed_methods)

    def _internal_error(self) -> dict:
        return build_error_response(500, "Internal server error", self.allowed_methods)


class GetUserLitersHandler(_Handler):
    """Reports the liters a customer has accumulated."""
    allowed_methods = READ_METHODS

    def handle(self, event: dict) -> dict:
        log.debug(f"Event received: {event}")

        if extract_method(event) == "OPTIONS":
            return build_preflight_response(self.allowed_methods)

        try:
            customer_id = resolve_customer_id(event)
            log_prefix = f"[Customer: {customer_id}]"
            log.info(f"{log_prefix} Fetching customer info.")

            with self.client_factory() as client:
                customer = client.fetch_customer(customer_id)

            if customer is None:
                log.error(f"{log_prefix} Customer not found.")
                raise ResourceNotFoundError("customer")

            body = customer_liters_message(customer.id or customer_id, customer.liters)
            log.info(f"{log_prefix} {body['message']}")
            return build_response(200, body, self.allowed_methods)

        except LitersError as e:
            log.error(f"get-user-liters failed with {e.status_code}: {e.message}")
            return self._error(e)

        except Exception as e:
            log.critical(f"Unexpected error in get-user-liters: {e}", exc_info=True)
            return self._internal_error()


class SetUserLitersHandler(_Handler):
    """Credits the liters of a paid order to the purchasing customer."""
    allowed_methods = WRITE_METHODS

    def handle(self, event: dict) -> dict:
        log.debug(f"Event received: {event}")

        method = extract_method(event)
        if method == "OPTIONS":
            return build_preflight_response(self.allowed_methods)
        if method != "POST":
            return self._error(MethodNotAllowedError())

        invocation = None
        try:
            invocation = resolve_order_invocation(event)
            with self.client_factory() as client:
                update = self.apply_order(client, invocation)

        except LitersError as e:
            log.error(f"set-user-liters failed with {e.status_code}: {e.message}")
            if isinstance(invocation, WebhookInvocation) and _is_permanent(e):
                # Acknowledge so the webhook is not delivered again.
                return build_response(200, {
                    "message": "Webhook acknowledged without update",
                    "orderId": invocation.order_id,
                    "customerId": invocation.customer_id,
                    "error": e.message,
                }, self.allowed_methods)
            return self._error(e)

        except Exception as e:
            log.critical(f"Unexpected error in set-user-liters: {e}", exc_info=True)
            return self._internal_error()

        message = liters_updated_message(update.customer_id, update.previous_liters, update.new_liters)
        if isinstance(invocation, WebhookInvocation):
            return build_response(200, {
                "message": message,
                "orderId": update.order_id,
                "customerId": update.customer_id,
                "liters": update.new_liters,
            }, self.allowed_methods)
        return build_response(200, message, self.allowed_methods)

    def apply_order(self, client: TiendaNubeClient, invocation: OrderInvocation) -> LitersUpdate:
        """
        Runs the read-modify-write sequence for one order.

        Args:
            client (TiendaNubeClient): Client used for all three calls.
            invocation (DirectInvocation | WebhookInvocation): Resolved input.

        Returns:
            LitersUpdate: Liters before and after the update.

        Raises:
            ResourceNotFoundError: If the order or customer does not exist.
            OrderWithoutCustomerError: If no customer can be attributed to the order.
            UpstreamStatusError / UpstreamUnavailableError: On Tienda Nube failures.
        """
        order_id = invocation.order_id
        log_prefix = f"[Order: {order_id}]"

        # --- 1. Order ---
        log.info(f"{log_prefix} Step 1: Fetching order.")
        order = client.fetch_order(order_id)
        if order is None:
            log.error(f"{log_prefix} Order not found.")
            raise ResourceNotFoundError("order")

        order_liters = compute_order_liters(order, self.config.liters_per_product)

        customer_id = None
        if isinstance(invocation, WebhookInvocation):
            customer_id = invocation.customer_id
        if not customer_id:
            customer_id = order.customer_id
        if not customer_id:
            log.error(f"{log_prefix} No customer found in order.")
            raise OrderWithoutCustomerError()

        log.info(f"{log_prefix} Order has {order_liters} liters for customer {customer_id}.")

        # --- 2. Customer ---
        log.info(f"{log_prefix} Step 2: Fetching customer {customer_id}.")
        customer = client.fetch_customer(customer_id)
        if customer is None:
            log.error(f"{log_prefix} Customer {customer_id} not found.")
            raise ResourceNotFoundError("customer")

        previous_liters = customer.liters
        new_liters = compute_updated_total(customer, order_liters)

        # --- 3. Update ---
        log.info(f"{log_prefix} Step 3: Updating customer {customer_id} from {previous_liters} to {new_liters} liters.")
        updated = client.update_customer_liters(customer_id, new_liters)

        return LitersUpdate(
            order_id=order_id,
            customer_id=updated.id or customer_id,
            order_liters=order_liters,
            previous_liters=previous_liters,
            new_liters=updated.liters,
        )


def _is_permanent(error: LitersError) -> bool:
    return error.status_code == 404 or isinstance(error, OrderWithoutCustomerError)
