"""Text-to-image client for a local `sdapi`-compatible server.

Processing flow (`Client.generate_image`):
    1. Apply request defaults in place.
    2. Validate parameters; violations fail before any network call.
    3. Join the configured base URL with `/sdapi/v1/txt2img`.
    4. POST the defaulted request as JSON.
    5. Decode the response into a `GenerationResult`.
    6. Reject a result with zero images.

`Client.generate_image_and_save` additionally decodes the first image and writes
it to disk through `drawthings.image.storage`.

Error handling strategy:
    - Validation failure -> `ValidationError`.
    - Transport failure, unreadable or unparsable body -> `NetworkError`.
    - Non-2xx status -> `APIError` with status code and raw body.
    - Unusable 2xx payload (no images, malformed base64) -> `DecodeError`.
    - Output directory/file failures -> `LocalIOError`.
    Nothing is retried; one attempt yields a result or one classified error.

Determinism:
    Request assembly is deterministic for a fixed request and configuration.
    Image content depends on the server and on `seed`.

Concurrency:
    A client holds only frozen configuration; concurrent calls on one client are
    independent exchanges.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from drawthings.config import TXT2IMG_PATH, ClientConfig
from drawthings.core.errors import APIError, DecodeError, NetworkError
from drawthings.core.types import GenerationRequest, GenerationResult
from drawthings.image.storage import decode_image, write_image
from drawthings.transport.client import HTTPClient, HTTPStatusError, RequestLogger, TransportError
from drawthings.validation.params import validate_text_to_image_request

logger = logging.getLogger(__name__)


class Client:
    """Client for the txt2img endpoint.

    Args:
        config: Base configuration; defaults to `ClientConfig()`.
        base_url: Overrides `config.base_url`.
        timeout: Overrides `config.timeout` (seconds).
        logger: Overrides `config.logger` (a `RequestLogger`).
        log_request_bodies: Overrides `config.log_request_bodies`.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        logger: RequestLogger | None = None,
        log_request_bodies: bool | None = None,
    ) -> None:
        base = config if config is not None else ClientConfig()
        self._config = base.replace(
            base_url=base_url,
            timeout=timeout,
            logger=logger,
            log_request_bodies=log_request_bodies,
        )
        self._http = HTTPClient(
            timeout=self._config.timeout,
            logger=self._config.logger,
            log_request_bodies=self._config.log_request_bodies,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def timeout(self) -> float:
        return self._config.timeout

    @property
    def endpoint(self) -> str:
        return self._config.base_url.rstrip("/") + TXT2IMG_PATH

    def generate_image(
        self,
        request: GenerationRequest,
        *,
        timeout: float | None = None,
    ) -> GenerationResult:
        """Generate images for `request`.

        Args:
            request: Request to send. Defaults are applied to it in place.
            timeout: Deadline in seconds for the whole exchange, from sending the
                request to reading the last body byte; defaults to the client
                timeout.

        Returns:
            `GenerationResult` with at least one base64 image.

        Raises:
            ValidationError, NetworkError, APIError, DecodeError.
        """
        request.apply_defaults()

        validate_text_to_image_request(
            request.prompt,
            request.steps,
            request.guidance_scale,
            request.width,
            request.height,
        )

        deadline = self._http.deadline_after(timeout)

        try:
            response = self._http.post_json(self.endpoint, request.to_payload(), deadline=deadline)
        except TransportError as exc:
            raise NetworkError("API request failed", exc) from exc

        try:
            document = self._http.decode_json_response(response, deadline=deadline)
        except HTTPStatusError as exc:
            raise APIError(exc.status_code, exc.status, exc.body) from exc
        except TransportError as exc:
            raise NetworkError("failed to decode response", exc) from exc

        result = GenerationResult.from_payload(document)
        if not result.images:
            raise DecodeError("no images in response")

        logger.debug("Received %d image(s) from %s", len(result.images), self.endpoint)
        return result

    def generate_image_and_save(
        self,
        request: GenerationRequest,
        output_path: str | os.PathLike,
        *,
        timeout: float | None = None,
    ) -> Path:
        """Generate an image and write the first result to `output_path`.

        Only the first image is persisted; use `generate_image` to access any
        additional images the server returns.

        Returns:
            Path of the written file.

        Raises:
            ValidationError, NetworkError, APIError, DecodeError: As
                `generate_image`, plus `DecodeError` for malformed base64.
            LocalIOError: Output directory or file could not be written.
        """
        result = self.generate_image(request, timeout=timeout)

        image_data = decode_image(result.images[0])

        return write_image(image_data, output_path)
