import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config
from core.errors import AceError
from core.ids import generate_request_id
from core.log import configure_logging
from routers.analyze import router as analyze_router
from routers.health import router as health_router
from routers.models import router as models_router
from schemas.errors import ErrorDetail, ErrorResponse

configure_logging(config.LOG_LEVEL)
logger = logging.getLogger("ace")

app = FastAPI(title="Augmented Context Engine", version=config.SERVICE_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "X-Tenant-Id", "X-Request-Id"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Attach X-Request-Id (generated if absent) and log the request."""
    request_id = request.headers.get("x-request-id") or generate_request_id()
    request.state.request_id = request_id
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    logger.info(
        "HTTP %s %s -> %d (%d ms) request_id=%s",
        request.method,
        request.url.path,
        response.status_code,
        int((time.perf_counter() - started) * 1000),
        request_id,
    )
    return response


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    retryable: bool,
    details: dict | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        request_id=getattr(request.state, "request_id", None),
        error=ErrorDetail(code=code, message=message, details=details, retryable=retryable),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _debug_details(exc: Exception) -> dict | None:
    if config.ENVIRONMENT == "development":
        return {"original_error": str(exc)}
    return None


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"path": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("Request validation failed on %s: %d error(s)", request.url.path, len(errors))
    return _error_response(
        request, 400, "VALIDATION_ERROR", "Request body failed validation", False, {"errors": errors}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        code = exc.detail.get("code", "HTTP_ERROR")
        message = exc.detail.get("message", "")
    else:
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        message = str(exc.detail)
    return _error_response(request, exc.status_code, code, message, False)


@app.exception_handler(AceError)
async def ace_error_handler(request: Request, exc: AceError):
    logger.error("Request failed on %s: %s", request.url.path, exc.message)
    return _error_response(request, exc.status_code, exc.code, exc.message, exc.retryable, _debug_details(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    # runs outside request_context, so the id header is set here
    response = _error_response(request, 500, "INTERNAL_ERROR", "Internal server error", True, _debug_details(exc))
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers["X-Request-Id"] = request_id
    return response


app.include_router(health_router)
app.include_router(health_router, prefix=config.API_BASE_PATH)
app.include_router(models_router, prefix=config.API_BASE_PATH)
app.include_router(analyze_router, prefix=config.API_BASE_PATH)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
