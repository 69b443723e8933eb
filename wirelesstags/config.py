"""Runtime configuration for the Wireless Tags platform client."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .const import (
    API_MAX_RETRIES,
    API_RETRY_BASE_DELAY,
    API_RETRY_MAX_DELAY,
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    WAIT_BEFORE_RETRY,
)

ENV_BASE_URL = "WIRELESSTAG_BASE_URL"
ENV_TIMEOUT = "WIRELESSTAG_TIMEOUT"
ENV_RETRY_ON_ERROR = "WIRELESSTAG_RETRY_ON_ERROR"

_TRUE_STRINGS = ("1", "true", "yes", "on")


@dataclass
class PlatformConfig:
    """Connection settings for the cloud API.

    Credentials go to ``WirelessTagPlatform.signin()`` instead.
    """

    base_url: str = BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    api_max_retries: int = API_MAX_RETRIES
    retry_base_delay: float = API_RETRY_BASE_DELAY
    retry_max_delay: float = API_RETRY_MAX_DELAY
    retry_on_error: bool = False
    wait_before_retry: float = WAIT_BEFORE_RETRY

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.api_max_retries < 1:
            raise ValueError(f"api_max_retries must be at least 1, got {self.api_max_retries}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PlatformConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in mapping.items() if k in known})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PlatformConfig":
        """Build a config from ``WIRELESSTAG_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values: dict = {}
        if environ.get(ENV_BASE_URL):
            values["base_url"] = environ[ENV_BASE_URL]
        if environ.get(ENV_TIMEOUT):
            values["request_timeout"] = float(environ[ENV_TIMEOUT])
        if environ.get(ENV_RETRY_ON_ERROR):
            values["retry_on_error"] = environ[ENV_RETRY_ON_ERROR].strip().lower() in _TRUE_STRINGS
        return cls(**values)
