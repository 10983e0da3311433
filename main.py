import logging
import time

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from pydantic import ValidationError
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings, load_record, warn_if_env_file_missing
from errors import ConfigValidationError, EncodeError, RenderError
from observability import setup_logging
from schemas import IdentityRecord
from synthesis import encode_qr, encode_vcard, render_home

logger = logging.getLogger(__name__)

SERVICE_NAME = "contactshare"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'self' 'unsafe-inline'; img-src 'self' data:",
}

# 1x1 transparent PNG
FAVICON = bytes([
    0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A, 0x00, 0x00, 0x00, 0x0D,
    0x49, 0x48, 0x44, 0x52, 0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,
    0x08, 0x06, 0x00, 0x00, 0x00, 0x1F, 0x15, 0xC4, 0x89, 0x00, 0x00, 0x00,
    0x0A, 0x49, 0x44, 0x41, 0x54, 0x78, 0x9C, 0x63, 0x00, 0x01, 0x00, 0x00,
    0x05, 0x00, 0x01, 0x0D, 0x0A, 0x2D, 0xB4, 0x00, 0x00, 0x00, 0x00, 0x49,
    0x45, 0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82,
])

QUIET_PATHS = {"/health", "/favicon.ico"}

# ------------------------------
# Dependencies
# ------------------------------

def get_record(request: Request) -> IdentityRecord:
    return request.app.state.record

# ------------------------------
# Middleware and error handlers
# ------------------------------

async def log_requests(request: Request, call_next):
    if request.url.path in QUIET_PATHS:
        return await call_next(request)
    start = time.perf_counter()
    client = request.client.host if request.client else "-"
    logger.info(f"{request.method} {request.url.path} {client}")
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Completed in {elapsed_ms:.2f}ms",
        extra={"path": request.url.path, "duration_ms": round(elapsed_ms, 2)},
    )
    return response


async def render_error_handler(request: Request, exc: RenderError):
    logger.error(
        exc.message,
        extra={"error_code": exc.code, "path": request.url.path},
        exc_info=exc,
    )
    return PlainTextResponse(
        "Internal Server Error", status_code=exc.http_status, headers=SECURITY_HEADERS,
    )


async def encode_error_handler(request: Request, exc: EncodeError):
    logger.error(
        f"QR code generation error: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return PlainTextResponse(exc.message, status_code=exc.http_status)


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return PlainTextResponse(
            "404 page not found", status_code=404, headers=SECURITY_HEADERS,
        )
    return await http_exception_handler(request, exc)

# ------------------------------
# Routes
# ------------------------------

def home(record: IdentityRecord = Depends(get_record)):
    return HTMLResponse(render_home(record), headers=SECURITY_HEADERS)


def vcard(record: IdentityRecord = Depends(get_record)):
    return Response(
        content=encode_vcard(record),
        media_type="text/vcard",
        headers={"Content-Disposition": 'attachment; filename="contact.vcf"'},
    )


def qr(record: IdentityRecord = Depends(get_record)):
    return Response(
        content=encode_qr(record.canonical_url),
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=3600"},
    )


def health():
    return JSONResponse({"status": "healthy", "service": SERVICE_NAME})


def favicon():
    return Response(
        content=FAVICON,
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=604800"},
    )


def create_app(record: IdentityRecord) -> FastAPI:
    """Build the HTTP surface around one immutable identity record."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.record = record

    app.middleware("http")(log_requests)
    app.add_exception_handler(RenderError, render_error_handler)
    app.add_exception_handler(EncodeError, encode_error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    app.get("/", response_class=HTMLResponse)(home)
    app.get("/contact.vcf")(vcard)
    app.get("/qr")(qr)
    app.get("/health")(health)
    app.get("/favicon.ico")(favicon)
    return app


def main():
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical(f"Configuration error: {e}")
        raise SystemExit(1)

    setup_logging(settings.log_level, settings.log_format)
    warn_if_env_file_missing()
    try:
        record = load_record(settings)
    except ConfigValidationError as e:
        logger.critical(f"Configuration error: {e.message}")
        raise SystemExit(1)

    logger.info(f"Starting server with contact info for: {record.display_name}")
    app = create_app(record)

    import uvicorn
    logger.info(f"Server starting on port {settings.port}")
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        timeout_keep_alive=120,
        timeout_graceful_shutdown=5,
    )
    logger.info("Server exiting")


if __name__ == "__main__":
    main()
