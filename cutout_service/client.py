"""Helper script for exercising the cut-out relay.

Run ``process`` on a photo, edit the result if you like, then run
``corners`` on the edited file.
"""

import argparse
import mimetypes
import sys
from pathlib import Path

import httpx

from .segmentation import UPLOAD_FIELD

ROUTES = {
    "process": "/process-image",
    "corners": "/add-corner-pixels",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send an image to the cut-out relay and save the PNG response."
    )
    parser.add_argument(
        "step",
        choices=sorted(ROUTES),
        help="Which step to run: 'process' (remove background) or 'corners'.",
    )
    parser.add_argument(
        "input_image",
        type=Path,
        help="Path to the image to upload.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the PNG (default: <input>-<step>.png).",
    )
    parser.add_argument(
        "--url",
        default="http://localhost:3000",
        help="Base URL of the running service (default: %(default)s).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Request timeout in seconds (default: %(default)s).",
    )
    return parser


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    endpoint = args.url.rstrip("/") + ROUTES[args.step]
    output = args.output or args.input_image.with_name(f"{args.input_image.stem}-{args.step}.png")
    content_type = mimetypes.guess_type(args.input_image.name)[0] or "application/octet-stream"

    files = {UPLOAD_FIELD: (args.input_image.name, args.input_image.read_bytes(), content_type)}
    try:
        with httpx.Client(timeout=args.timeout, transport=transport) as client:
            response = client.post(endpoint, files=files)
    except httpx.HTTPError as exc:
        sys.stderr.write(f"Request to {endpoint} failed: {exc}\n")
        return 1

    if response.status_code != 200:
        sys.stderr.write(f"Request failed ({response.status_code}): {response.text}\n")
        return 1

    output.write_bytes(response.content)
    print(f"Saved {args.step} result to {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
