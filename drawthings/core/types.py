"""Request and response data contracts for the txt2img pipeline.

Architectural role:
    Defines the request shape built by callers and the result shape returned by
    `drawthings.image.client.Client.generate_image`.

Defaulting:
    Unset optional fields hold their zero value (`0`, `0.0`, `""`).
    `GenerationRequest.apply_defaults` replaces exactly those zero values and
    leaves every explicitly set field untouched, so applying it twice is the same
    as applying it once.

Wire mapping:
    `GenerationRequest.to_payload` omits empty/zero fields the same way the
    server-side schema treats them as "use server default".

Determinism:
    Pure data handling, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from drawthings.core.errors import DecodeError

DEFAULT_STEPS = 20
DEFAULT_GUIDANCE_SCALE = 4.0
DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512
RANDOM_SEED = -1


@dataclass
class GenerationRequest:
    """Parameters for one text-to-image generation.

    Attributes:
        prompt: Textual description of the desired image (required).
        negative_prompt: Elements to exclude from the image.
        steps: Inference steps. Range 1-150, default 20.
        guidance_scale: Prompt adherence. Range 1.0-20.0, default 4.0.
        width: Output width in pixels. Range 64-4096, default 512.
        height: Output height in pixels. Range 64-4096, default 512.
        seed: Random seed, `-1` requests a fresh random seed. Default -1.
    """

    prompt: str = ""
    negative_prompt: str = ""
    steps: int = 0
    guidance_scale: float = 0.0
    width: int = 0
    height: int = 0
    seed: int = 0

    def apply_defaults(self) -> None:
        """Fill zero-valued optional fields with their defaults, in place."""
        if self.steps == 0:
            self.steps = DEFAULT_STEPS
        if self.guidance_scale == 0:
            self.guidance_scale = DEFAULT_GUIDANCE_SCALE
        if self.width == 0:
            self.width = DEFAULT_WIDTH
        if self.height == 0:
            self.height = DEFAULT_HEIGHT
        if self.seed == 0:
            self.seed = RANDOM_SEED

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body sent to `/sdapi/v1/txt2img`.

        Returns:
            Dict with `prompt` always present and every other field included only
            when it is non-empty/non-zero.
        """
        payload: dict[str, Any] = {"prompt": self.prompt}

        if self.negative_prompt:
            payload["negative_prompt"] = self.negative_prompt
        if self.steps:
            payload["steps"] = self.steps
        if self.guidance_scale:
            payload["guidance_scale"] = self.guidance_scale
        if self.width:
            payload["width"] = self.width
        if self.height:
            payload["height"] = self.height
        if self.seed:
            payload["seed"] = self.seed

        return payload


@dataclass(frozen=True)
class GenerationResult:
    """Images returned by the server, as base64 strings in server order."""

    images: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, data: Any) -> "GenerationResult":
        """Build a result from a decoded JSON response document.

        Args:
            data: Parsed JSON body of a 2xx response.

        Returns:
            `GenerationResult` holding the `images` list as a tuple.

        Raises:
            DecodeError: The document is not an object, or `images` is present but
                is not a list of strings.

        Edge cases:
            - Missing or `null` `images` yields an empty result; the pipeline
              decides whether zero images is acceptable.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"unexpected response document type: {type(data).__name__}")

        images = data.get("images")
        if images is None:
            return cls()

        if not isinstance(images, list) or not all(isinstance(item, str) for item in images):
            raise DecodeError("malformed images field in response")

        return cls(images=tuple(images))

    def __len__(self) -> int:
        return len(self.images)
