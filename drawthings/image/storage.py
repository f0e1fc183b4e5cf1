"""Image payload decoding and file persistence.

Processing flow:
    1. `decode_image` strips an optional `data:<mime>;base64,` header and
       line breaks, then decodes the payload strictly.
    2. `write_image` creates the parent directory (with intermediate segments),
       writes a temporary file beside the target and renames it into place.

Error handling strategy:
    - Malformed base64 -> `DecodeError` (the server handed back unusable data).
    - Directory creation or write failures -> `LocalIOError`.

Temporary files:
    The temporary file lives in the target directory so the final `os.replace`
    stays on one filesystem. It is removed if the write fails.
"""

from __future__ import annotations

import base64
import binascii
import contextlib
import logging
import os
import tempfile
from pathlib import Path

from drawthings.core.errors import DecodeError, LocalIOError
from drawthings.core.types import GenerationResult

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:"
IMAGE_FILE_MODE = 0o644


def decode_image(payload: str) -> bytes:
    """Decode one base64 image payload to raw bytes.

    Raises:
        DecodeError: Payload is not valid base64.
    """
    encoded = payload.strip()
    if encoded.startswith(DATA_URL_PREFIX) and "," in encoded:
        encoded = encoded.split(",", 1)[1]
    # Line-wrapped base64 is accepted.
    encoded = encoded.replace("\r", "").replace("\n", "")

    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("failed to decode base64 image data", exc) from exc


def decode_images(result: GenerationResult) -> list[bytes]:
    """Decode every image of `result`, preserving order."""
    return [decode_image(payload) for payload in result.images]


def write_image(data: bytes, output_path: str | os.PathLike) -> Path:
    """Write `data` to `output_path`, creating parent directories as needed.

    Returns:
        The target path.

    Raises:
        LocalIOError: Parent directory could not be created or the file could
            not be written.
    """
    target = Path(output_path)
    parent = target.parent

    if str(parent) not in ("", "."):
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LocalIOError("failed to create output directory", exc) from exc

    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            delete=False,
            dir=parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as temp_file:
            temp_name = temp_file.name
            temp_file.write(data)
        # NamedTemporaryFile creates 0600 files.
        os.chmod(temp_name, IMAGE_FILE_MODE)
        os.replace(temp_name, target)
    except OSError as exc:
        if temp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(temp_name)
        raise LocalIOError("failed to write image file", exc) from exc

    logger.debug("Wrote %d bytes to %s", len(data), target)
    return target
