"""
HTTP surface for the validation pipeline.

Four POST routes, one per request schema, all served by the same handler
factory. Binding failures short-circuit with "json not valid" before the
pipeline runs; pipeline outcomes map to 200/400/500 envelopes. Field-level
detail never appears in a response.
"""

from typing import Any, Dict, Optional, Type

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from util.logging import logger

from ..core.audit import AuditLogger
from ..core.config import VERSION, debug_enabled, get_audit_log_path, get_log_level
from ..core.outcome import Internal, Ok, Outcome
from ..core.pipeline import ValidationPipeline
from ..core.schemas import (
    FavoriteNumRequest,
    GuessCatNameRequest,
    PetNameRequest,
    RequestSchema,
    ThaiCIDRequest,
)
from ..core.validator import SchemaValidator
from .schemas import Envelope, HealthResponse

BAD_REQUEST_JSON_SYNTAX = "json not valid"
BAD_REQUEST_NOT_VALID = "request not valid"
INTERNAL_SERVER_ERROR = "internal server error"

API_PREFIX = "/api/v1"

# path -> (route name, schema)
VALIDATION_ROUTES: Dict[str, tuple] = {
    "/favorite": ("favorite", FavoriteNumRequest),
    "/pet-name": ("validate_pet_name", PetNameRequest),
    "/thai-cid": ("validate_thai_cid", ThaiCIDRequest),
    "/guess-cat": ("guess_the_cat_name", GuessCatNameRequest),
}


def envelope_response(status_code: int, msg: Optional[str] = None) -> JSONResponse:
    envelope = Envelope(is_ok=msg is None, msg=msg)
    return JSONResponse(status_code=status_code, content=envelope.to_content())


def outcome_response(outcome: Outcome) -> JSONResponse:
    """Map a pipeline outcome to its caller-visible envelope."""
    if isinstance(outcome, Ok):
        return envelope_response(200)
    if isinstance(outcome, Internal):
        return envelope_response(500, INTERNAL_SERVER_ERROR)
    return envelope_response(400, BAD_REQUEST_NOT_VALID)


def build_pipeline(audit_log_path: Optional[str] = None) -> ValidationPipeline:
    """Wire a pipeline from configuration."""
    audit_logger = AuditLogger(audit_log_path or get_audit_log_path())
    return ValidationPipeline(SchemaValidator(), audit_logger, diagnostics=logger)


def get_pipeline(request: Request) -> ValidationPipeline:
    """Resolve the pipeline the application was created with."""
    return request.app.state.pipeline


def make_validation_endpoint(schema: Type[RequestSchema], path: str):
    """Build the POST handler that binds a body to `schema` and runs the pipeline."""

    def endpoint(
        payload: Optional[Dict[str, Any]] = Body(default=None),
        pipeline: ValidationPipeline = Depends(get_pipeline),
    ) -> JSONResponse:
        # An empty body binds every field as absent
        try:
            instance = schema.model_validate(payload or {})
        except ValidationError as e:
            logger.log_malformed_input(path, str(e))
            return envelope_response(400, BAD_REQUEST_JSON_SYNTAX)

        return outcome_response(pipeline.run(instance))

    return endpoint


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable or non-object JSON bodies."""
    logger.log_malformed_input(request.url.path, str(exc.errors()))
    return envelope_response(400, BAD_REQUEST_JSON_SYNTAX)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return envelope_response(500, INTERNAL_SERVER_ERROR)


def create_app(pipeline: Optional[ValidationPipeline] = None) -> FastAPI:
    """Create the application around an explicitly constructed pipeline."""
    logger.set_level(get_log_level())

    app = FastAPI(
        title="Field Audit API",
        version=VERSION,
        description="Request validation with an append-only audit trail of failed fields",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None
    )
    app.state.pipeline = pipeline or build_pipeline()

    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    for path, (name, schema) in VALIDATION_ROUTES.items():
        app.add_api_route(
            API_PREFIX + path,
            make_validation_endpoint(schema, API_PREFIX + path),
            methods=["POST"],
            name=name,
        )

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint(pipeline: ValidationPipeline = Depends(get_pipeline)):
        """Check service health."""
        return HealthResponse(
            status="healthy",
            version=VERSION,
            audit_log_path=pipeline.audit_logger.path,
        )

    return app


app = create_app()
