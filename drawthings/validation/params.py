"""Parameter range checks for txt2img requests.

Validation behavior:
    Checks run in a fixed order and stop at the first violation:
    1. prompt non-empty
    2. steps in [1, 150]
    3. guidance scale in [1.0, 20.0]
    4. width in [64, 4096]
    5. height in [64, 4096]
    Boundary values are accepted.

Side effects:
    None. No network or filesystem access; safe to call repeatedly.
"""

from drawthings.core.errors import ValidationError

MIN_STEPS = 1
MAX_STEPS = 150
MIN_GUIDANCE_SCALE = 1.0
MAX_GUIDANCE_SCALE = 20.0
MIN_DIMENSION = 64
MAX_DIMENSION = 4096


def validate_text_to_image_request(
    prompt: str,
    steps: int,
    guidance_scale: float,
    width: int,
    height: int,
) -> None:
    """Validate already-defaulted request parameters.

    Raises:
        ValidationError: For the first parameter outside its domain, carrying the
            offending field name and a readable reason.
    """
    if not prompt:
        raise ValidationError("prompt", "prompt is required and cannot be empty")

    if not MIN_STEPS <= steps <= MAX_STEPS:
        raise ValidationError(
            "steps",
            f"steps must be between {MIN_STEPS} and {MAX_STEPS}, got {steps}",
        )

    # Chained comparison also rejects NaN.
    if not MIN_GUIDANCE_SCALE <= guidance_scale <= MAX_GUIDANCE_SCALE:
        raise ValidationError(
            "guidance_scale",
            f"guidance_scale must be between {MIN_GUIDANCE_SCALE} and "
            f"{MAX_GUIDANCE_SCALE}, got {guidance_scale:.2f}",
        )

    if not MIN_DIMENSION <= width <= MAX_DIMENSION:
        raise ValidationError(
            "width",
            f"width must be between {MIN_DIMENSION} and {MAX_DIMENSION} pixels, got {width}",
        )

    if not MIN_DIMENSION <= height <= MAX_DIMENSION:
        raise ValidationError(
            "height",
            f"height must be between {MIN_DIMENSION} and {MAX_DIMENSION} pixels, got {height}",
        )
