"""FastAPI entrypoint for the cut-out relay service."""

import uvicorn
from fastapi import FastAPI

from image_relay import ServiceConfig, Settings, create_app, settings

from .processor import CutoutProcessor
from .segmentation import SegmentationClient


def build_app(config: Settings = settings, transport=None) -> FastAPI:
    """
    Build the relay app from settings.

    The API key is handed to the segmentation client here, so handlers never
    read the environment themselves.
    """
    segmentation = SegmentationClient(
        api_key=config.photoroom_api_key,
        segment_url=config.photoroom_segment_url,
        timeout=config.photoroom_timeout,
        transport=transport,
    )
    return create_app(
        CutoutProcessor(segmentation),
        ServiceConfig(
            description="Background removal relay with fixed resize and corner marking.",
            cors_allow_origins=config.cors_allow_origins,
            log_level=config.log_level,
        ),
    )


app = build_app()


def main():
    """Run the relay service."""
    uvicorn.run(
        "cutout_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
