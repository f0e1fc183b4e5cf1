"""JSON-over-HTTP transport used by the txt2img pipeline.

Processing flow:
    1. `post_json` serializes the body, logs the outbound line, sends exactly one
       POST with `Content-Type: application/json`, logs the inbound status.
    2. `decode_json_response` reads the whole body, logs it, maps non-2xx
       statuses to `HTTPStatusError`, and parses 2xx bodies as JSON.

Error handling strategy:
    - Serialization, URL and network failures (DNS, refused connection, TLS,
      deadline exceeded) all raise `TransportError` with the original cause.
    - Non-2xx responses raise `HTTPStatusError` carrying status and raw body.
    - Unparsable 2xx bodies raise `ResponseDecodeError`.
    Callers classify these further; this module knows nothing about images.

Deadline:
    One `time.monotonic()` deadline covers the whole exchange. The remaining
    time is the `requests` timeout for connecting and waiting for headers, and
    the body is read with `read1` so the deadline is checked between socket
    reads; a slow or trickling body raises `TransportError("deadline exceeded")`.

Resource handling:
    Responses are requested with `stream=True`; `decode_json_response` owns
    reading them and closes each response exactly once on every exit path.

Request logging:
    The optional `RequestLogger` sink is a diagnostic side channel. A sink that
    raises is reported through the module logger and never fails the request.

Security considerations:
    With `log_request_bodies=True` the sink receives the serialized request,
    which includes prompt text.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Protocol

import requests
import urllib3

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
REDACTED_BODY = "<redacted>"
DEADLINE_EXCEEDED = "deadline exceeded"
READ_CHUNK_SIZE = 64 * 1024


class RequestLogger(Protocol):
    """Sink for outbound/inbound diagnostic lines."""

    def logf(self, fmt: str, *args: Any) -> None:
        """Format `fmt % args` and emit it."""
        ...


class LoggingSink:
    """`RequestLogger` backed by a stdlib `logging.Logger`."""

    def __init__(self, target: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.target = target or logging.getLogger("drawthings.requests")
        self.level = level

    def logf(self, fmt: str, *args: Any) -> None:
        self.target.log(self.level, fmt, *args)


class TransportError(Exception):
    """The HTTP exchange could not be completed or its body could not be used."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ResponseDecodeError(TransportError):
    """A 2xx response body was not valid JSON."""


class HTTPStatusError(TransportError):
    """The server answered with a status outside 200-299."""

    def __init__(self, status_code: int, status: str, body: str) -> None:
        super().__init__(f"HTTP {status_code}: {status}")
        self.status_code = status_code
        self.status = status
        self.body = body


def _status_text(response: requests.Response) -> str:
    reason = (response.reason or "").strip()
    if reason:
        return f"{response.status_code} {reason}"
    return str(response.status_code)


def _body_text(raw: bytes, encoding: str | None) -> str:
    """Decode a body for logging and diagnostics; never raises."""
    try:
        return raw.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        # Server declared a charset Python does not know.
        return raw.decode("utf-8", errors="replace")


class HTTPClient:
    """Thin wrapper around `requests.post` with request logging.

    Holds no connection state; every call is an independent exchange, so one
    instance can be shared across threads.
    """

    def __init__(
        self,
        timeout: float,
        logger: RequestLogger | None = None,
        log_request_bodies: bool = True,
    ) -> None:
        self.timeout = timeout
        self.logger = logger
        self.log_request_bodies = log_request_bodies

    def _emit(self, fmt: str, *args: Any) -> None:
        if self.logger is None:
            return
        try:
            self.logger.logf(fmt, *args)
        except Exception:
            logger.warning("Request logger failed; continuing without it", exc_info=True)

    def deadline_after(self, timeout: float | None = None) -> float:
        """Return the `time.monotonic()` instant `timeout` seconds from now.

        `None` uses the client timeout.
        """
        return time.monotonic() + (timeout if timeout is not None else self.timeout)

    def post_json(
        self,
        url: str,
        body: Any = None,
        *,
        deadline: float | None = None,
    ) -> requests.Response:
        """Send one JSON POST and return the unread response.

        Args:
            url: Absolute endpoint URL.
            body: JSON-serializable payload, or `None` for an empty body.
            deadline: `time.monotonic()` instant by which the whole exchange must
                finish; defaults to the client timeout from now.

        Returns:
            The streamed `requests.Response`. Pass it to `decode_json_response`
            with the same deadline; it reads and closes the response.

        Raises:
            TransportError: Serialization, request construction or network
                failure, or the deadline has already passed.
        """
        if deadline is None:
            deadline = self.deadline_after()

        data = None
        if body is not None:
            try:
                data = json.dumps(body)
            except (TypeError, ValueError) as exc:
                raise TransportError("failed to marshal request body", exc) from exc

            logged_body = data if self.log_request_bodies else REDACTED_BODY
            self._emit("POST %s\nRequest body: %s", url, logged_body)
        else:
            self._emit("POST %s", url)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TransportError(DEADLINE_EXCEEDED)

        try:
            response = requests.post(
                url,
                data=data,
                headers={"Content-Type": JSON_CONTENT_TYPE},
                timeout=remaining,
                stream=True,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError("request failed", exc) from exc

        self._emit("Response status: %s", _status_text(response))

        return response

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        # read1 returns as soon as any bytes arrive, so a trickling body is
        # checked against the deadline between socket reads.
        chunks = []
        while True:
            if time.monotonic() >= deadline:
                raise TransportError(DEADLINE_EXCEEDED)
            try:
                chunk = response.raw.read1(READ_CHUNK_SIZE, decode_content=True)
            except (urllib3.exceptions.HTTPError, OSError) as exc:
                raise TransportError("failed to read response body", exc) from exc
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)

    def decode_json_response(
        self,
        response: requests.Response,
        *,
        deadline: float | None = None,
    ) -> Any:
        """Read, log and parse a response body, then release the connection.

        Args:
            response: Unread response returned by `post_json`.
            deadline: `time.monotonic()` instant by which the body must be fully
                read; defaults to the client timeout from now.

        Returns:
            The parsed JSON document of a 2xx response.

        Raises:
            HTTPStatusError: Status outside 200-299 (body kept verbatim).
            ResponseDecodeError: 2xx body is not valid JSON.
            TransportError: Body could not be read, or the deadline passed
                while reading it.
        """
        if deadline is None:
            deadline = self.deadline_after()

        try:
            raw = self._read_body(response, deadline)

            text = _body_text(raw, response.encoding)
            self._emit("Response body: %s", text)

            if not 200 <= response.status_code < 300:
                raise HTTPStatusError(response.status_code, _status_text(response), text)

            try:
                return json.loads(raw)
            except ValueError as exc:
                raise ResponseDecodeError("failed to unmarshal response", exc) from exc
        finally:
            response.close()
