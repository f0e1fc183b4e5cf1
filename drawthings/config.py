"""Client configuration and process-wide defaults.

Architectural role:
    Centralizes the server endpoint, request deadline and request-logging
    settings consumed by `drawthings.image.client.Client`.

Resolution order:
    1. Named overrides passed to `Client(...)` or `ClientConfig.replace(...)`.
    2. Environment (`ClientConfig.from_env`), after `load_dotenv()`.
    3. Module constants below.

Relevant environment variables:
    - `DRAWTHINGS_BASE_URL`
    - `DRAWTHINGS_TIMEOUT` (seconds)
    - `DRAWTHINGS_LOG_REQUEST_BODIES` (`true`/`false`)

Determinism:
    A `ClientConfig` is frozen; a client never changes configuration after it is
    constructed.

Security considerations:
    Request bodies (including prompt text) are written to the request logger by
    default. Set `log_request_bodies=False` to redact them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace as dataclass_replace
from typing import Any

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_URL = "http://127.0.0.1:7860"
# Five minutes; generation on local hardware is slow.
DEFAULT_TIMEOUT = 300.0
TXT2IMG_PATH = "/sdapi/v1/txt2img"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class ClientConfig:
    """Immutable per-client settings.

    Attributes:
        base_url: Server root, for example `http://127.0.0.1:7860`.
        timeout: Request deadline in seconds.
        logger: Optional `RequestLogger` sink; `None` keeps the client silent.
        log_request_bodies: Whether outbound JSON bodies are written to the sink.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    logger: Any = None
    log_request_bodies: bool = True

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    def replace(self, **changes: Any) -> "ClientConfig":
        """Return a copy with the non-`None` values of `changes` applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        if not applied:
            return self
        return dataclass_replace(self, **applied)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from environment variables, falling back to defaults.

        Raises:
            ValueError: `DRAWTHINGS_TIMEOUT` is not a positive number.
        """
        base_url = os.getenv("DRAWTHINGS_BASE_URL", "").strip() or DEFAULT_BASE_URL
        timeout = float(os.getenv("DRAWTHINGS_TIMEOUT", "").strip() or DEFAULT_TIMEOUT)
        return cls(
            base_url=base_url,
            timeout=timeout,
            log_request_bodies=_env_flag("DRAWTHINGS_LOG_REQUEST_BODIES", True),
        )
