"""FastAPI application factory for stateless request/response services."""

import inspect
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .direct import render_bytes
from .errors import ServiceError
from .intake import read_upload
from .models import ErrorResponse, HealthResponse
from .processor import BaseProcessor, StatelessAction

logger = logging.getLogger(__name__)


@dataclass
class ServiceConfig:
    """
    Configuration for building a stateless microservice application.

    Args:
        name: Override service name (defaults to processor.name)
        version: Override service version (defaults to processor.version)
        description: Short description for generated docs
        cors_allow_origins: Origins allowed by the CORS middleware; empty disables it
        log_level: Root logging level
    """

    name: str | None = None
    version: str | None = None
    description: str | None = None
    cors_allow_origins: list[str] | None = None
    log_level: str = "INFO"


def _upload_request_body(field_name: str) -> dict:
    """OpenAPI request body for a route that reads one multipart file field."""
    return {
        "requestBody": {
            "required": True,
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {field_name: {"type": "string", "format": "binary"}},
                        "required": [field_name],
                    }
                }
            },
        }
    }


async def _render_result(action: StatelessAction, call_result):
    if inspect.isawaitable(call_result):
        call_result = await call_result
    if isinstance(call_result, Response):
        return call_result
    if action.media_type and isinstance(call_result, (bytes, bytearray, memoryview)):
        return render_bytes(call_result, action.media_type)
    return call_result


def create_app(processor: BaseProcessor, config: ServiceConfig | None = None) -> FastAPI:
    """
    Create a FastAPI application for a stateless processor.

    Args:
        processor: The processor instance implementing business logic
        config: Optional service configuration
    """

    config = config or ServiceConfig()

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    service_name = config.name or processor.name
    service_version = config.version or processor.version
    service_description = config.description or f"{service_name} stateless API"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s %s", service_name, service_version)
        yield
        await processor.close()
        logger.info("Stopped %s", service_name)

    app = FastAPI(
        title=f"{service_name.title()} Stateless API",
        description=service_description,
        version=service_version,
        lifespan=lifespan,
    )

    app.state.processor = processor
    app.state.service_config = config

    if config.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.cors_allow_origins),
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Render handler failures as the JSON error envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).to_content(),
        )

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError | RequestValidationError):
        """Handle request parameter and response model validation errors."""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Validation error", detail=str(exc)).to_content(),
        )

    @app.get("/", response_model=HealthResponse)
    async def root():
        return HealthResponse(status="healthy", version=service_version)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(status="healthy", version=service_version)

    actions = processor.get_stateless_actions()
    if not actions:
        logger.warning(
            "Processor %s registered with stateless service but get_stateless_actions() returned nothing.",
            processor.name,
        )

    def make_endpoint(action: StatelessAction):
        if action.upload_field:
            # Multipart upload; the handler gets None when the field is missing
            async def endpoint(request: Request):
                upload = await read_upload(request, action.upload_field)
                return await _render_result(action, action.handler(upload))
        else:
            # No request input
            async def endpoint():
                return await _render_result(action, action.handler())

        return endpoint

    for action in actions:
        logger.info("Registering stateless action '%s' at %s", action.name, action.path)

        endpoint = make_endpoint(action)

        route_kwargs = {
            "methods": list(action.methods),
            "response_model": action.response_model,
            "summary": action.summary,
            "description": action.description,
            "tags": list(action.tags) if action.tags else None,
            "responses": {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
            "openapi_extra": _upload_request_body(action.upload_field) if action.upload_field else None,
        }
        if action.media_type:
            route_kwargs["response_class"] = Response
            route_kwargs["responses"][200] = {"content": {action.media_type: {}}}
        route_kwargs = {k: v for k, v in route_kwargs.items() if v is not None}

        app.api_route(action.path, **route_kwargs)(endpoint)

    return app
