# ─────────────────────────────────────────────────────────────────────────────
# Custom Exceptions + FastAPI Exception Handlers
# ─────────────────────────────────────────────────────────────────────────────


import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


# ── Exception hierarchy ──────────────────────────────────────────────────────


class DioramaError(Exception):
    """Base exception for all diorama service errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidAddressError(DioramaError):
    """Raised when an address fails sanitization or the region allowlist."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid address. Enter a full street address in a supported region.",
            status_code=400,
        )


class UnknownStyleError(DioramaError):
    """Raised when a styleId is not in the style registry."""

    def __init__(self, style_id: str, valid_ids: list[str]):
        self.style_id = style_id
        super().__init__(
            f"Unknown styleId '{style_id[:50]}'. Valid styles: {', '.join(valid_ids)}",
            status_code=400,
        )


class FallbackUnavailableError(DioramaError):
    """Raised when a fallback is needed but the catalog has nothing for the style."""

    def __init__(self, style_id: str):
        super().__init__(
            f"No imagery is available for this address and style '{style_id}' "
            "has no pre-rendered substitute. Try another address or style.",
            status_code=400,
        )


class InvalidRequestError(DioramaError):
    """Raised for malformed request fields outside the address/style checks."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class EndpointRetiredError(DioramaError):
    """Raised by endpoints that were deliberately retired."""

    def __init__(self, path: str, replacement: str):
        super().__init__(
            f"{path} has been retired. Use {replacement} instead.",
            status_code=410,
        )


class ProviderError(DioramaError):
    """Raised when an external imagery or AI provider call fails."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} failed: {reason}", status_code=500)


class ImageryFetchError(ProviderError):
    """Raised when street-level or aerial imagery cannot be fetched."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        super().__init__(f"{kind} imagery", reason)


class VisionError(ProviderError):
    """Raised when image analysis fails."""

    def __init__(self, reason: str):
        super().__init__("Image analysis", reason)


class SynthesisError(ProviderError):
    """Raised when image synthesis fails on every model attempted."""

    def __init__(self, reason: str):
        super().__init__("Image synthesis", reason)


class GenerationFailedError(DioramaError):
    """Raised when the generation pipeline fails after validation."""

    def __init__(self, details: str):
        self.details = details
        super().__init__("Generation failed", status_code=500)


# ── Handler registration ────────────────────────────────────────────────────


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app.

    Endpoints raise DioramaError subclasses; these handlers catch them
    and return structured JSON. No inline try/except in endpoints.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies and query params are client errors (400, not 422)."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        logger.info("request_validation_failed", path=request.url.path, field=field)
        return JSONResponse(
            status_code=400,
            content={
                "error": f"{field}: {message}" if field else message,
                "type": "InvalidRequestError",
            },
        )

    @app.exception_handler(GenerationFailedError)
    async def generation_failed_handler(
        request: Request, exc: GenerationFailedError
    ) -> JSONResponse:
        logger.error("generation_failed_response", details=exc.details)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.message,
                "details": exc.details,
                "type": "GenerationFailedError",
            },
        )

    @app.exception_handler(DioramaError)
    async def diorama_error_handler(request: Request, exc: DioramaError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("diorama_error", error=exc.message, error_type=type(exc).__name__)
        else:
            logger.info("client_error", error=exc.message, error_type=type(exc).__name__)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "type": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_error", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "type": "UnhandledError"},
        )
