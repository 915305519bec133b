"""
config.py — Service Configuration

Settings are read from the environment exactly once, at the entry point, and the
resulting LitersConfig is passed into the handlers. Business logic never looks at
os.environ itself.

Environment variables:
    TIENDA_NUBE_EXTERNAL_API_URL  Base URL of the Tienda Nube API (required)
    TIENDA_NUBE_AUTH_TOKEN        Access token sent as bearer credential
    TIENDA_NUBE_USER_AGENT        User agent required by the Tienda Nube API policy
    LITERS_PER_PRODUCT            Liters credited per purchased unit (default 1)
    LOG_LEVEL                     Logging level (default INFO)
    LOG_FILE                      Optional path of an additional log file
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

from .exceptions import ConfigurationError

DEFAULT_LITERS_PER_PRODUCT = 1
DEFAULT_TIMEOUT_SECONDS = 10.0


def parse_liters_per_product(raw_value) -> int:
    """
    Converts the configured conversion factor into a positive integer.
    Unset, non-numeric, zero or negative values fall back to the default.
    """
    try:
        value = int(str(raw_value).strip())
    except (TypeError, ValueError):
        return DEFAULT_LITERS_PER_PRODUCT
    return value if value > 0 else DEFAULT_LITERS_PER_PRODUCT


class LitersConfig(BaseModel):
    """
    Explicit configuration handed to the handlers and the Tienda Nube client.

    Attributes:
        api_url (str): Base URL of the Tienda Nube API, without trailing slash.
        auth_token (str): Bearer token for the 'Authentication' header.
        user_agent (str): Value of the 'User-Agent' header.
        liters_per_product (int): Liters credited per unit of the first order line.
        timeout_seconds (float): Timeout applied to every upstream call.
        log_level (str): Level passed to setup_logging().
        log_file (str | None): Optional log file for setup_logging().
    """
    model_config = {"frozen": True}

    api_url: str
    auth_token: str = ""
    user_agent: str = ""
    liters_per_product: int = DEFAULT_LITERS_PER_PRODUCT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("liters_per_product", mode="before")
    @classmethod
    def _coerce_liters_per_product(cls, value) -> int:
        return parse_liters_per_product(value)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LitersConfig":
        """
        Builds the configuration from environment variables.

        Args:
            environ (Mapping[str, str], optional): Source mapping, defaults to os.environ.

        Returns:
            LitersConfig: The populated configuration.

        Raises:
            ConfigurationError: If TIENDA_NUBE_EXTERNAL_API_URL is missing or empty.
        """
        if environ is None:
            environ = os.environ

        api_url = environ.get("TIENDA_NUBE_EXTERNAL_API_URL", "").strip()
        if not api_url:
            raise ConfigurationError("Missing required environment variable: TIENDA_NUBE_EXTERNAL_API_URL")

        return cls(
            api_url=api_url,
            auth_token=environ.get("TIENDA_NUBE_AUTH_TOKEN", ""),
            user_agent=environ.get("TIENDA_NUBE_USER_AGENT", ""),
            liters_per_product=environ.get("LITERS_PER_PRODUCT"),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            log_file=environ.get("LOG_FILE") or None,
        )
