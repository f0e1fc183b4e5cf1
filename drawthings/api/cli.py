"""
Command-line adapter for the txt2img client.

Architectural role:
- Parse flags into a `GenerationRequest` and client configuration.
- Delegate generation and saving to `drawthings.image.client.Client`.
- Map classified failures to a message on stderr and a non-zero exit code.

Configuration resolution:
- `--base-url` / `--timeout` default to `ClientConfig.from_env()`, which reads
  `DRAWTHINGS_BASE_URL` / `DRAWTHINGS_TIMEOUT` (and `.env` via `load_dotenv`).

Exit codes:
- 0 on success or `--version`.
- 1 on any `DrawThingsError` (validation, network, API, decode, local I/O).
- 2 on usage errors (argparse convention, including a missing `--prompt`).

Side effects:
- Writes the generated image to `--output`.
- With `--verbose`, configures root logging and logs request/response lines.
"""

import argparse
import logging
import sys

from drawthings import __version__
from drawthings.config import ClientConfig
from drawthings.core.errors import DrawThingsError
from drawthings.core.types import (
    DEFAULT_GUIDANCE_SCALE,
    DEFAULT_HEIGHT,
    DEFAULT_STEPS,
    DEFAULT_WIDTH,
    RANDOM_SEED,
    GenerationRequest,
)
from drawthings.image.client import Client
from drawthings.transport.client import LoggingSink

EXAMPLES = """\
examples:
  %(prog)s --prompt "a beautiful sunset"
  %(prog)s --prompt "a cat" --steps 30 --width 768 --height 768 --output cat.png
  %(prog)s --prompt "landscape" --seed 42 --guidance-scale 7.0
"""


def build_parser(defaults: ClientConfig) -> argparse.ArgumentParser:
    """Build the argument parser, using `defaults` for connection flags."""
    parser = argparse.ArgumentParser(
        prog="drawthings",
        description="Generate images using the Draw Things API.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--prompt", required=True, help="Textual description of the desired image")
    parser.add_argument("--negative-prompt", default="", help="Elements to exclude from the image")
    parser.add_argument("--steps", type=int, default=DEFAULT_STEPS, help="Inference steps (1-150)")
    parser.add_argument(
        "--guidance-scale",
        type=float,
        default=DEFAULT_GUIDANCE_SCALE,
        help="Adherence to the prompt (1.0-20.0)",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Image height in pixels")
    parser.add_argument("--seed", type=int, default=RANDOM_SEED, help="Random seed (-1 for random)")
    parser.add_argument("--output", default="output.png", help="Output file path")
    parser.add_argument("--base-url", default=defaults.base_url, help="Base URL of the API server")
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Request timeout in seconds",
    )
    parser.add_argument("--verbose", action="store_true", help="Log request and response details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    """Run the CLI and return the process exit code."""
    try:
        defaults = ClientConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    if not args.prompt:
        parser.error("--prompt must not be empty")

    request_logger = None
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
        request_logger = LoggingSink()

    try:
        client = Client(
            defaults,
            base_url=args.base_url,
            timeout=args.timeout,
            logger=request_logger,
        )
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    request = GenerationRequest(
        prompt=args.prompt,
        negative_prompt=args.negative_prompt,
        steps=args.steps,
        guidance_scale=args.guidance_scale,
        width=args.width,
        height=args.height,
        seed=args.seed,
    )

    print(f"Generating image with prompt: {args.prompt!r}")
    print(
        f"Parameters: steps={args.steps}, guidance_scale={args.guidance_scale:.2f}, "
        f"width={args.width}, height={args.height}, seed={args.seed}"
    )

    try:
        saved = client.generate_image_and_save(request, args.output)
    except DrawThingsError as e:
        print(f"Error: failed to generate image: {e}", file=sys.stderr)
        return 1

    print(f"Image saved to: {saved}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
