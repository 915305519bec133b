"""
resolver.py — Input Resolution

Extracts the HTTP method and the customer or order identifier from a trigger
envelope. Both API Gateway shapes are accepted:

    REST API (v1):  {"httpMethod": "POST", "queryStringParameters": ..., "pathParameters": ..., "body": "..."}
    HTTP API (v2):  {"requestContext": {"http": {"method": "POST"}}, ...}

Nothing in here performs network I/O; invalid input is rejected with an
InvalidRequestError before the handlers talk to Tienda Nube.
"""

import base64
import binascii
import json
import logging
from typing import Optional

from .exceptions import InvalidRequestError
from .models import DirectInvocation, OrderInvocation, WebhookInvocation

log = logging.getLogger(__name__)

WEBHOOK_ORDER_PAID = "order/paid"


def extract_method(event: dict) -> Optional[str]:
    """Returns the upper-cased HTTP method of either envelope shape, or None."""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return method.upper() if method else None


def parse_body(event: dict) -> Optional[dict]:
    """
    Decodes the JSON body of the envelope.

    Returns:
        dict | None: The body object. None if there is no body, it is not valid
        JSON, or it does not decode to an object.
    """
    raw_body = event.get("body")
    if not raw_body:
        return None
    if isinstance(raw_body, dict):
        return raw_body

    try:
        if event.get("isBase64Encoded"):
            raw_body = base64.b64decode(raw_body, validate=True).decode("utf-8")
        body = json.loads(raw_body)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, TypeError) as e:
        log.error(f"Error parsing JSON body: {e}")
        return None

    return body if isinstance(body, dict) else None


def is_valid_id(value) -> bool:
    """An identifier is valid if it is a string that is not blank."""
    return isinstance(value, str) and len(value.strip()) > 0


def resolve_customer_id(event: dict) -> str:
    """
    Finds the customer id for get-user-liters.

    Sources, first non-empty wins:
        1. Query parameter 'userId'  (GET /get-user-liters?userId=123)
        2. Path parameter 'userId'   (GET /litros/{userId})
        3. Body field 'id'           (POST /litros)

    Raises:
        InvalidRequestError: If no valid id is found.
    """
    query = event.get("queryStringParameters") or {}
    path = event.get("pathParameters") or {}

    user_id = query.get("userId") or path.get("userId")
    if not user_id:
        body = parse_body(event)
        user_id = body.get("id") if body else None

    if not is_valid_id(user_id):
        raise InvalidRequestError("Missing or invalid user ID")
    return user_id.strip()


def resolve_order_invocation(event: dict) -> OrderInvocation:
    """
    Finds the order (and possibly customer) id for set-user-liters.

    A body carrying 'orderId' or 'id' is a direct invocation; the customer is read
    from the order later. Otherwise an 'order/paid' event with a 'data' object is a
    webhook invocation, and both ids are taken from the payload.

    Raises:
        InvalidRequestError: If the body matches neither shape or the order id is invalid.
    """
    body = parse_body(event) or {}

    if "orderId" in body or "id" in body:
        order_id = body.get("orderId")
        if order_id is None:
            order_id = body.get("id")
        if not is_valid_id(order_id):
            raise InvalidRequestError("Missing or invalid order ID")
        return DirectInvocation(order_id=order_id.strip())

    data = body.get("data")
    if body.get("event") == WEBHOOK_ORDER_PAID and isinstance(data, dict):
        order_id = data.get("id")
        order_id = str(order_id).strip() if order_id is not None else ""
        if not order_id:
            raise InvalidRequestError("Missing or invalid order ID")

        customer = data.get("customer")
        customer_id = customer.get("id") if isinstance(customer, dict) else None
        customer_id = str(customer_id).strip() if customer_id is not None else ""
        return WebhookInvocation(order_id=order_id, customer_id=customer_id or None)

    raise InvalidRequestError("Missing or invalid order ID")
