"""
Main FastAPI application for the QXB token gateway.
Configures the API server with routes, middleware and error handling.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

import structlog

from tokengate.core.config import settings
from tokengate.core.database import DatabaseManager, close_database, init_database
from tokengate.core.exceptions import BlockchainError, ConfigurationError, GatewayException
from tokengate.core.logging import setup_logging
from tokengate.api.middleware import add_middleware
from tokengate.api.schemas.common import HealthCheckResponse, HealthData, create_error_response
from tokengate.api.routes import auth, reward, system, token
from tokengate.services.eth_client import EthereumClient


logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting QXB API server", environment=settings.environment)

    if settings.is_production and settings.uses_default_jwt_secret:
        raise ConfigurationError("JWT_SECRET must be set in production")
    if settings.uses_default_jwt_secret:
        logger.warning("Using the default JWT secret; set JWT_SECRET")

    await init_database()
    await DatabaseManager.create_tables()

    eth_client = EthereumClient()
    try:
        await eth_client.connect()
    except BlockchainError as e:
        logger.warning("Ethereum node unreachable at startup", error=e.message)
    app.state.eth_client = eth_client

    yield

    # Shutdown
    logger.info("Shutting down QXB API server")

    try:
        await eth_client.close()
    except Exception as e:
        logger.error("Error closing Ethereum client", error=str(e))
    await close_database()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(message).model_dump(),
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Render every error with the response envelope."""

    @app.exception_handler(GatewayException)
    async def gateway_exception_handler(request: Request, exc: GatewayException):
        if exc.status_code >= 500:
            logger.error(
                "Request error",
                path=request.url.path,
                code=exc.code,
                error=exc.message,
            )
        else:
            logger.info(
                "Request rejected",
                path=request.url.path,
                code=exc.code,
                error=exc.message,
            )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Invalid request body", path=request.url.path, errors=exc.errors())
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    # Setup logging
    setup_logging()

    app = FastAPI(
        title="QXB Token Gateway API",
        description=(
            "Custodial wallet and token gateway for the QXB ERC-20 contract. "
            "Plain-text endpoint reference at /api/docs."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        # /api/docs is the plain-text reference
        docs_url="/swagger",
        redoc_url=None,
    )

    add_middleware(app)
    add_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        tags=["System"],
        summary="Health Check",
    )
    async def health_check():
        """Health check endpoint."""
        database_ok = await DatabaseManager.health_check()
        return HealthCheckResponse(
            data=HealthData(database="ok" if database_ok else "unavailable")
        )

    # Include routers
    app.include_router(system.router, prefix=settings.api_prefix, tags=["System"])
    app.include_router(token.router, prefix=f"{settings.api_prefix}/token", tags=["Token"])
    app.include_router(reward.router, prefix=f"{settings.api_prefix}/reward", tags=["Reward"])
    app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])

    logger.info("FastAPI application created successfully")
    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tokengate.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower()
    )
