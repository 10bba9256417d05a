"""Background removal relay built on the image_relay toolkit."""

from .processor import CutoutProcessor
from .segmentation import SegmentationClient

__all__ = ["CutoutProcessor", "SegmentationClient"]
