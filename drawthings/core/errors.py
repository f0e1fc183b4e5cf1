"""Error taxonomy for the txt2img client.

Architectural role:
    Defines the closed set of failure kinds surfaced by `drawthings.image.client`
    and the predicates callers use to branch on them.

Classification model:
    - Every error carries an `ErrorKind` tag.
    - Predicates compare the tag only; message text is never inspected.
    - Each failure is classified once, at the layer where it first becomes
      distinguishable, and is not re-classified further up.

Kinds:
    - `VALIDATION`: a request parameter is outside its documented domain.
    - `NETWORK`: the exchange failed at the transport layer (timeout, refused
      connection, unreadable or unparsable body).
    - `API`: the server answered with a non-2xx status.
    - `DECODE`: the response was well-formed JSON but carried no usable image.
    - `LOCAL_IO`: writing the output file failed (save path only).

Chaining:
    Wrapped causes are stored on `.cause` and raised with `raise ... from cause`,
    so `__cause__` points at the same object.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying which failure family an error belongs to."""

    VALIDATION = "validation"
    NETWORK = "network"
    API = "api"
    DECODE = "decode"
    LOCAL_IO = "local_io"


class DrawThingsError(Exception):
    """Base class for every error raised by this package."""

    kind: ErrorKind

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class ValidationError(DrawThingsError):
    """A request parameter violates its documented domain.

    Raised before any network resource is used.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"validation error for field '{self.field}': {self.message}"
        return f"validation error: {self.message}"


class NetworkError(DrawThingsError):
    """The request could not be completed at the transport layer."""

    kind = ErrorKind.NETWORK

    def __str__(self) -> str:
        if self.cause is not None:
            return f"network error: {self.message}: {self.cause}"
        return f"network error: {self.message}"


class APIError(DrawThingsError):
    """The server responded, but with a non-success status code.

    Attributes:
        status_code: Numeric HTTP status.
        status: Status line text, for example `"500 Internal Server Error"`.
        body: Raw response body, kept for diagnostics whether or not it is JSON.
    """

    kind = ErrorKind.API

    def __init__(self, status_code: int, status: str = "", body: str = "") -> None:
        super().__init__(status)
        self.status_code = status_code
        self.status = status
        self.body = body

    def __str__(self) -> str:
        if self.status:
            return f"API error (status {self.status_code}): {self.status}"
        return f"API error (status {self.status_code}): {self.body}"


class DecodeError(DrawThingsError):
    """The response was accepted but held no usable image data."""

    kind = ErrorKind.DECODE

    def __str__(self) -> str:
        if self.cause is not None:
            return f"decode error: {self.message}: {self.cause}"
        return f"decode error: {self.message}"


class LocalIOError(DrawThingsError):
    """Creating the output directory or writing the image file failed."""

    kind = ErrorKind.LOCAL_IO

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


def error_kind(err: BaseException | None) -> ErrorKind | None:
    """Return the tag of `err`, or `None` for absent or foreign exceptions."""
    if isinstance(err, DrawThingsError):
        return err.kind
    return None


def is_validation_error(err: BaseException | None) -> bool:
    return error_kind(err) is ErrorKind.VALIDATION


def is_network_error(err: BaseException | None) -> bool:
    return error_kind(err) is ErrorKind.NETWORK


def is_api_error(err: BaseException | None) -> bool:
    return error_kind(err) is ErrorKind.API


def is_decode_error(err: BaseException | None) -> bool:
    return error_kind(err) is ErrorKind.DECODE


def is_local_io_error(err: BaseException | None) -> bool:
    return error_kind(err) is ErrorKind.LOCAL_IO
