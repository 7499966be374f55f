"""
Custom middleware for the FastAPI application.
Provides CORS, request logging and security headers.
"""

import time
from typing import Callable
from fastapi import FastAPI, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

import structlog

from tokengate.core.config import settings


logger = structlog.get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]
CORS_MAX_AGE = 3600


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        start_time = time.perf_counter()

        logger.debug(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            process_time = time.perf_counter() - start_time
            response.headers["X-Process-Time"] = f"{process_time:.6f}"

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time=round(process_time, 6),
            )

            return response

        except Exception as e:
            process_time = time.perf_counter() - start_time

            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                process_time=round(process_time, 6),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": "Internal server error"},
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers to response."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["X-API-Version"] = settings.app_version

        return response


def add_cors_middleware(app: FastAPI) -> None:
    """CORS with credentials, echoing the caller's Origin."""
    origins = settings.cors_origins or ["*"]
    cors_options = {
        "allow_credentials": True,
        "allow_methods": CORS_METHODS,
        "allow_headers": CORS_HEADERS,
        "max_age": CORS_MAX_AGE,
    }

    if "*" in origins:
        # A wildcard cannot be combined with credentials; mirror any origin instead
        app.add_middleware(CORSMiddleware, allow_origin_regex=".*", **cors_options)
    else:
        app.add_middleware(CORSMiddleware, allow_origins=origins, **cors_options)


def add_middleware(app: FastAPI) -> None:
    """Add all middleware to the FastAPI app."""

    # Custom middleware (order matters - last added is executed first)
    app.add_middleware(SecurityHeadersMiddleware)

    # Logging
    app.add_middleware(LoggingMiddleware)

    # CORS outermost so preflight requests are answered before anything else
    add_cors_middleware(app)

    logger.info("Middleware configured successfully")
