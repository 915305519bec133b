"""
main.py — FastAPI Entry Point for Local Runs

This module serves the two liters handlers over plain HTTP, so they can be run and
exercised without a function platform:

    uvicorn liters_service.main:app --port 8000

Every request is converted into the same proxy envelope the serverless platform
delivers and passed to the very same handlers, so behavior is identical.

Routes:
    • GET|POST|OPTIONS /get-user-liters   (?userId=... or JSON body {"id": ...})
    • GET|POST|OPTIONS /litros/{userId}
    • any method       /set-user-liters   (method gating is done by the handler)
    • GET              /health
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Request, Response
from starlette.concurrency import run_in_threadpool

from .config import LitersConfig
from .exceptions import ConfigurationError
from .logging_config import get_logger, setup_logging
from .responses import READ_METHODS, WRITE_METHODS, build_error_response
from .workflow import GetUserLitersHandler, SetUserLitersHandler

# Initialization
setup_logging()
log = get_logger(__name__)
app = FastAPI(title="Agua Marina Liters Service")

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@lru_cache(maxsize=None)
def get_config() -> LitersConfig:
    """Loads the configuration from the environment once per process."""
    config = LitersConfig.from_env()
    setup_logging(config.log_level, config.log_file)
    return config


def get_read_handler(config: LitersConfig = Depends(get_config)) -> GetUserLitersHandler:
    return GetUserLitersHandler(config)


def get_write_handler(config: LitersConfig = Depends(get_config)) -> SetUserLitersHandler:
    return SetUserLitersHandler(config)


async def to_event(request: Request, path_parameters: Optional[dict] = None) -> dict:
    """
    Converts a FastAPI request into an API Gateway style proxy envelope.

    Args:
        request (Request): Incoming request.
        path_parameters (dict, optional): Matched path parameters.

    Returns:
        dict: Envelope with httpMethod, path, headers, queryStringParameters,
        pathParameters and the raw body.
    """
    body = await request.body()
    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "queryStringParameters": dict(request.query_params) or None,
        "pathParameters": path_parameters,
        "body": body.decode("utf-8", errors="replace") if body else None,
    }


def to_response(result: dict) -> Response:
    media_type = "application/json" if result["body"] else None
    return Response(
        content=result["body"],
        status_code=result["statusCode"],
        headers=result["headers"],
        media_type=media_type,
    )


@app.api_route("/get-user-liters", methods=["GET", "POST", "OPTIONS"])
async def get_user_liters(request: Request, handler: GetUserLitersHandler = Depends(get_read_handler)):
    """Reports the liters of the customer named in the query string or body."""
    event = await to_event(request)
    # The handler blocks on the Tienda Nube call.
    result = await run_in_threadpool(handler.handle, event)
    return to_response(result)


@app.api_route("/litros/{userId}", methods=["GET", "POST", "OPTIONS"])
async def get_user_liters_by_path(
        userId: str,
        request: Request,
        handler: GetUserLitersHandler = Depends(get_read_handler)
):
    """Reports the liters of the customer named in the path."""
    event = await to_event(request, {"userId": userId})
    result = await run_in_threadpool(handler.handle, event)
    return to_response(result)


@app.api_route("/set-user-liters", methods=ALL_METHODS)
async def set_user_liters(request: Request, handler: SetUserLitersHandler = Depends(get_write_handler)):
    """
    Credits the liters of an order to its customer.

    Accepts either a direct call ({"orderId": "..."} or {"id": "..."}) or the
    Tienda Nube 'order/paid' webhook payload.
    """
    event = await to_event(request)
    log.info(f"set-user-liters called via {request.method}.")
    result = await run_in_threadpool(handler.handle, event)
    return to_response(result)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Answers like the handlers do when the service cannot load its configuration."""
    log.critical(f"Liters service cannot start: {exc}")
    allowed_methods = WRITE_METHODS if request.url.path == "/set-user-liters" else READ_METHODS
    return to_response(build_error_response(500, "Internal server error", allowed_methods))


# Health Check Endpoint
@app.get("/health")
def health_check():
    """
    Simple health check endpoint.

    Returns:
        dict: A basic JSON object indicating service availability.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
