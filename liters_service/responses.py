"""
responses.py — Response Builders

All handlers answer with the proxy-integration shape
{"statusCode": int, "headers": dict, "body": str}, always with CORS headers.
"""

import json

READ_METHODS = "GET, POST, OPTIONS"
WRITE_METHODS = "POST, OPTIONS"


def cors_headers(allowed_methods: str) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": allowed_methods,
    }


def build_response(status_code: int, payload, allowed_methods: str) -> dict:
    """Serializes payload (dict or str) as the JSON body of a response."""
    return {
        "statusCode": status_code,
        "headers": cors_headers(allowed_methods),
        "body": json.dumps(payload),
    }


def build_error_response(status_code: int, message: str, allowed_methods: str) -> dict:
    return build_response(status_code, {"error": message}, allowed_methods)


def build_preflight_response(allowed_methods: str) -> dict:
    """Answer to an OPTIONS request: empty body, CORS headers only."""
    return {
        "statusCode": 200,
        "headers": cors_headers(allowed_methods),
        "body": "",
    }


def customer_liters_message(customer_id: str, liters: int) -> dict:
    return {
        "message": f"Customer {customer_id} has {liters} liters.",
        "liters": liters,
    }


def liters_updated_message(customer_id: str, previous_liters: int, new_liters: int) -> str:
    return f"Customer {customer_id} liters where updated from {previous_liters} to {new_liters}"
