"""Error taxonomy for stateless image services.

Every failure a handler can hit is raised as a ``ServiceError`` subclass and
rendered by the app factory as ``{"error": <message>}`` with the matching
status code. Upstream bodies and tracebacks stay in the server log.
"""

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."
MISSING_UPLOAD_MESSAGE = "No image file provided."
MISSING_API_KEY_MESSAGE = "Server configuration error: API key is missing."


class ServiceError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code: int = 500

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(ServiceError):
    """The service is missing configuration it needs for this request."""

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE):
        super().__init__(message, status_code=500)


class MissingUploadError(ServiceError):
    """The request carried no file under the expected form field."""

    def __init__(self, message: str = MISSING_UPLOAD_MESSAGE):
        super().__init__(message, status_code=400)


class UpstreamError(ServiceError):
    """
    The segmentation API answered with a non-success status.

    The upstream status and body are kept for logging only; the client always
    sees the generic internal error message.
    """

    def __init__(self, upstream_status: int, body: str = ""):
        super().__init__(INTERNAL_ERROR_MESSAGE, status_code=500)
        self.upstream_status = upstream_status
        self.body = body

    def __str__(self) -> str:
        return f"API responded with status: {self.upstream_status}"


class ImageProcessingError(ServiceError):
    """Decoding, resizing, compositing or encoding an image failed."""

    def __init__(self, reason: str = ""):
        super().__init__(INTERNAL_ERROR_MESSAGE, status_code=500)
        self.reason = reason

    def __str__(self) -> str:
        return self.reason or self.message
