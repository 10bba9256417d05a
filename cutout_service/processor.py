"""Processor exposing background removal and corner marking."""

import logging
from typing import List

import httpx

from image_relay import (
    PNG_MEDIA_TYPE,
    BaseProcessor,
    ConfigurationError,
    ImageProcessingError,
    MissingUploadError,
    ServiceError,
    StatelessAction,
    UpstreamError,
    UploadedImage,
    run_blocking,
)

from .imaging import TARGET_SIZE, add_corner_markers, read_dimensions, resize_to_target
from .segmentation import UPLOAD_FIELD, SegmentationClient

logger = logging.getLogger(__name__)


class CutoutProcessor(BaseProcessor):
    """
    Two independent steps of the cut-out workflow.

    ``/process-image`` removes the background through the segmentation API and
    resizes the result; ``/add-corner-pixels`` marks the corners of an image
    the user may have edited in between. The processor keeps no per-request
    state, so requests can run concurrently.
    """

    def __init__(self, segmentation: SegmentationClient):
        self.segmentation = segmentation

    @property
    def name(self) -> str:
        return "cutout-relay"

    def get_stateless_actions(self) -> List[StatelessAction]:
        return [
            StatelessAction(
                name="process_image",
                path="/process-image",
                upload_field=UPLOAD_FIELD,
                handler=self.handle_process_image,
                summary="Remove the background and resize to 1200x1300",
                description=(
                    "Forwards the uploaded image to the segmentation API, then scales "
                    "the cut-out to exactly 1200x1300 (aspect ratio not preserved) "
                    "and returns it as PNG."
                ),
                tags=("image",),
                media_type=PNG_MEDIA_TYPE,
            ),
            StatelessAction(
                name="add_corner_pixels",
                path="/add-corner-pixels",
                upload_field=UPLOAD_FIELD,
                handler=self.handle_add_corner_pixels,
                summary="Mark the four corners with opaque white pixels",
                description="Composites a 1x1 opaque white pixel at each corner and returns PNG.",
                tags=("image",),
                media_type=PNG_MEDIA_TYPE,
            ),
        ]

    async def handle_process_image(self, upload: UploadedImage | None) -> bytes:
        """Remove the background of the upload and resize the result."""
        logger.info("Received request for initial processing.")

        if not self.segmentation.is_configured:
            logger.error("API key is not configured.")
            raise ConfigurationError()
        if upload is None:
            logger.warning("No image file was uploaded.")
            raise MissingUploadError()

        try:
            logger.info(
                "Forwarding %s (%d bytes) to segmentation API for background removal...",
                upload.filename,
                upload.size,
            )
            cutout = await self.segmentation.remove_background(upload)

            logger.info("Background removed. Resizing image to %dx%d...", *TARGET_SIZE)
            resized = await run_blocking(resize_to_target, cutout)
        except UpstreamError as exc:
            logger.error("An error occurred during initial processing: %s", exc)
            raise
        except httpx.HTTPError as exc:
            logger.error("Segmentation request failed: %r", exc)
            raise ServiceError() from exc
        except Exception as exc:
            logger.exception("An error occurred during initial processing")
            raise ImageProcessingError(str(exc)) from exc

        logger.info("Initial processing complete.")
        return resized

    async def handle_add_corner_pixels(self, upload: UploadedImage | None) -> bytes:
        """Mark the corners of the uploaded image."""
        logger.info("Received request to add corner pixels.")

        if upload is None:
            logger.warning("No image file was uploaded for final processing.")
            raise MissingUploadError()

        try:
            width, height = await run_blocking(read_dimensions, upload.data)
            logger.info("Adding pixels to image of size %dx%d", width, height)
            marked = await run_blocking(add_corner_markers, upload.data)
        except Exception as exc:
            logger.exception("An error occurred during final processing")
            raise ImageProcessingError(str(exc)) from exc

        logger.info("Final processing complete.")
        return marked

    async def close(self) -> None:
        await self.segmentation.close()
