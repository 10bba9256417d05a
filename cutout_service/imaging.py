"""Pillow image operations behind the relay routes.

All functions take and return encoded bytes and are blocking; handlers run
them through ``run_blocking``.
"""

import io
from dataclasses import dataclass
from enum import Enum

from PIL import Image

TARGET_SIZE = (1200, 1300)
OUTPUT_FORMAT = "PNG"
OPAQUE_WHITE = (255, 255, 255, 255)

# Modes Pillow can write as PNG without conversion
PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}

# PNG stores greyscale with at most 16 bits per sample
DEEP_GREY_MAX = 65535


def _is_deep_grey(mode: str) -> bool:
    return mode == "I" or mode.startswith("I;16")


class Corner(str, Enum):
    """Anchor positions for single-pixel overlays."""

    TOP_LEFT = "northwest"
    TOP_RIGHT = "northeast"
    BOTTOM_LEFT = "southwest"
    BOTTOM_RIGHT = "southeast"

    def position(self, width: int, height: int) -> tuple[int, int]:
        """Pixel coordinate of this corner in a ``width`` x ``height`` image."""
        right = self in (Corner.TOP_RIGHT, Corner.BOTTOM_RIGHT)
        bottom = self in (Corner.BOTTOM_LEFT, Corner.BOTTOM_RIGHT)
        return (width - 1 if right else 0, height - 1 if bottom else 0)


@dataclass(frozen=True)
class PixelOverlay:
    """A 1x1 RGBA overlay anchored at one corner."""

    anchor: Corner
    color: tuple[int, int, int, int] = OPAQUE_WHITE


CORNER_MARKERS = [
    PixelOverlay(Corner.TOP_LEFT),
    PixelOverlay(Corner.TOP_RIGHT),
    PixelOverlay(Corner.BOTTOM_LEFT),
    PixelOverlay(Corner.BOTTOM_RIGHT),
]


def _encode(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format=OUTPUT_FORMAT)
    return buffer.getvalue()


def read_dimensions(image_bytes: bytes) -> tuple[int, int]:
    """Return (width, height) from the image header without decoding pixels."""
    with Image.open(io.BytesIO(image_bytes)) as img:
        return img.size


def resize_to_target(image_bytes: bytes, size: tuple[int, int] = TARGET_SIZE) -> bytes:
    """
    Scale the image to exactly ``size`` and encode it as PNG.

    This is a direct resize: the aspect ratio is not preserved and nothing
    is cropped.
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        source = img if img.mode in PNG_MODES else img.convert("RGBA")
        resized = source.resize(size, Image.Resampling.LANCZOS)
    return _encode(resized)


def _grey_level(color: tuple[int, int, int, int], old: int, max_value: int) -> int:
    """Blend an RGBA overlay onto one high-bit-depth greyscale value."""
    r, g, b, a = color
    level = round((r * 299 + g * 587 + b * 114) / 1000 * max_value / 255)
    return round((level * a + old * (255 - a)) / 255)


def _overlay_deep_grey(img: Image.Image, overlays: list[PixelOverlay]) -> Image.Image:
    # 16-bit greyscale would be clipped to 8 bits by an RGBA conversion
    canvas = img.copy()
    width, height = canvas.size
    for overlay in overlays:
        position = overlay.anchor.position(width, height)
        canvas.putpixel(position, _grey_level(overlay.color, canvas.getpixel(position), DEEP_GREY_MAX))
    return canvas


def apply_pixel_overlays(image_bytes: bytes, overlays: list[PixelOverlay]) -> bytes:
    """
    Composite 1x1 overlays onto the image and encode it as PNG.

    The image is converted to RGBA first, so every other pixel keeps its
    colour and gains full opacity where it had no alpha channel. 16-bit
    greyscale images stay in their own mode and overlays are written as grey
    levels on the full 16-bit scale. Overlays are applied in order; on images
    smaller than 2x2 several anchors land on the same pixel and the last one
    wins.
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        if _is_deep_grey(img.mode):
            return _encode(_overlay_deep_grey(img, overlays))
        canvas = img.convert("RGBA")

    width, height = canvas.size
    for overlay in overlays:
        marker = Image.new("RGBA", (1, 1), overlay.color)
        canvas.alpha_composite(marker, dest=overlay.anchor.position(width, height))
    return _encode(canvas)


def add_corner_markers(image_bytes: bytes) -> bytes:
    """Mark the four corners of the image with opaque white pixels."""
    return apply_pixel_overlays(image_bytes, CORNER_MARKERS)
