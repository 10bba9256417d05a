"""Image relay toolkit for stateless FastAPI image services."""

from .processor import BaseProcessor, StatelessAction
from .api import create_app, ServiceConfig
from .config import Settings, settings
from .direct import PNG_MEDIA_TYPE, run_blocking, render_bytes
from .errors import (
    ConfigurationError,
    ImageProcessingError,
    MissingUploadError,
    ServiceError,
    UpstreamError,
)
from .intake import UploadedImage, read_upload

__version__ = "1.0.0"


__all__ = [
    "BaseProcessor",
    "StatelessAction",
    "create_app",
    "ServiceConfig",
    "Settings",
    "settings",
    "PNG_MEDIA_TYPE",
    "run_blocking",
    "render_bytes",
    "ConfigurationError",
    "ImageProcessingError",
    "MissingUploadError",
    "ServiceError",
    "UpstreamError",
    "UploadedImage",
    "read_upload",
]
