"""Base processor interface for stateless (request/response) image services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List

from pydantic import BaseModel


@dataclass
class StatelessAction:
    """
    Definition of a stateless API route backed by a processor method.

    Attributes:
        name: Short identifier used for logging and OpenAPI docs.
        path: FastAPI route path (e.g., "/process-image").
        handler: Callable invoked with the parsed upload (or nothing).
        upload_field: Multipart file field to read; when set, the handler
            receives an ``UploadedImage`` or None if the field is missing.
        response_model: Optional Pydantic model for response serialization.
        methods: HTTP methods to expose (defaults to POST).
        summary: Optional OpenAPI summary.
        description: Optional longer description.
        tags: Optional OpenAPI tags.
        media_type: Media type used when the handler returns raw bytes.
    """

    name: str
    path: str
    handler: Callable[..., Awaitable[Any] | Any]
    upload_field: str | None = None
    response_model: type[BaseModel] | None = None
    methods: tuple[str, ...] = ("POST",)
    summary: str | None = None
    description: str | None = None
    tags: tuple[str, ...] | None = None
    media_type: str | None = None


class BaseProcessor(ABC):
    """
    Business logic behind a stateless image service.

    Subclasses name themselves, list their routes as ``StatelessAction``s and
    may hold clients that ``close()`` releases when the app shuts down.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Processor/service name used for logging and metadata."""

    @property
    def version(self) -> str:
        """Optional semantic version string."""
        return "1.0.0"

    def get_stateless_actions(self) -> List[StatelessAction]:
        """
        Return the list of stateless actions provided by this processor.

        Each action becomes one FastAPI route.
        """
        return []

    async def close(self) -> None:
        """Release clients or other resources when the app shuts down."""
