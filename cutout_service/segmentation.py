"""
Client for the Photoroom segmentation (background removal) API.

The service forwards the uploaded file unchanged and gets back the cut-out
image bytes. Authentication is a static key sent in the ``X-Api-Key`` header.
"""

import logging

import httpx

from image_relay import ConfigurationError, UpstreamError, UploadedImage

logger = logging.getLogger(__name__)

DEFAULT_SEGMENT_URL = "https://sdk.photoroom.com/v1/segment"
UPLOAD_FIELD = "image_file"


class SegmentationClient:
    """
    Thin async wrapper around the segmentation endpoint.

    Usage:
        client = SegmentationClient(api_key="...")
        cutout_bytes = await client.remove_background(upload)
        await client.close()
    """

    def __init__(
        self,
        api_key: str | None,
        segment_url: str = DEFAULT_SEGMENT_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the segmentation client.

        Args:
            api_key: Photoroom API key; None leaves the client unconfigured
            segment_url: Full URL of the segmentation endpoint
            timeout: Timeout for the outbound request in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.api_key = api_key or None
        self.segment_url = segment_url
        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None

    async def remove_background(self, upload: UploadedImage) -> bytes:
        """
        Send the upload to the segmentation API and return the result bytes.

        Raises:
            ConfigurationError: If no API key was configured
            UpstreamError: If the API answers with a non-success status
            httpx.HTTPError: On timeouts and connection failures
        """
        if not self.is_configured:
            raise ConfigurationError()

        files = {
            UPLOAD_FIELD: (
                upload.filename,
                upload.data,
                upload.content_type or "application/octet-stream",
            )
        }
        response = await self._client.post(
            self.segment_url,
            files=files,
            headers={"X-Api-Key": self.api_key},
        )

        if not response.is_success:
            logger.error(
                "Segmentation API error: %s %s %s",
                response.status_code,
                response.reason_phrase,
                response.text,
            )
            raise UpstreamError(response.status_code, response.text)

        return response.content

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()
