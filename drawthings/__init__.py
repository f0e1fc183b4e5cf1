"""Client library for the Draw Things / `sdapi` txt2img HTTP API.

Quick start:

    from drawthings import Client, GenerationRequest

    client = Client()
    request = GenerationRequest(prompt="a beautiful sunset over mountains", steps=20)
    client.generate_image_and_save(request, "output.png")

Configuration:

    client = Client(
        base_url="http://custom-server:7860",
        timeout=600,
        logger=LoggingSink(),
    )

Error handling:
    Failures are raised as one of `ValidationError`, `NetworkError`, `APIError`,
    `DecodeError` (or `LocalIOError` when saving). Use the `is_*_error`
    predicates or `err.kind` to branch on them.

This is an unofficial library and is not affiliated with the makers of the
Draw Things application.
"""

from drawthings.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig
from drawthings.core.errors import (
    APIError,
    DecodeError,
    DrawThingsError,
    ErrorKind,
    LocalIOError,
    NetworkError,
    ValidationError,
    is_api_error,
    is_decode_error,
    is_local_io_error,
    is_network_error,
    is_validation_error,
)
from drawthings.core.types import GenerationRequest, GenerationResult
from drawthings.image.client import Client
from drawthings.image.storage import decode_image, decode_images
from drawthings.transport.client import LoggingSink, RequestLogger

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "Client",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "DecodeError",
    "DrawThingsError",
    "ErrorKind",
    "GenerationRequest",
    "GenerationResult",
    "LocalIOError",
    "LoggingSink",
    "NetworkError",
    "RequestLogger",
    "ValidationError",
    "decode_image",
    "decode_images",
    "is_api_error",
    "is_decode_error",
    "is_local_io_error",
    "is_network_error",
    "is_validation_error",
]
