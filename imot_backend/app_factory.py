"""
Backend API - Avalúo de propiedades en Bulgaria
"""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imot_backend import __version__
from imot_backend.dependencies import ServiceContainer, build_services
from imot_backend.exceptions import (
    AreaAnalysisError,
    ConfigurationError,
    EntityNotFoundError,
    ImotError,
    ProviderError,
    ValidationError,
)
from imot_backend.routers import (
    documents_router,
    evaluations_router,
    maps_router,
    photos_router,
    properties_router,
    valuations_router,
)
from imot_backend.services.time_service import get_local_now

logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (ValidationError, 400),
    (EntityNotFoundError, 404),
    (AreaAnalysisError, 404),
    (ProviderError, 502),
    (ConfigurationError, 500),
]


def error_response(status_code: int, message: str, details=None) -> JSONResponse:
    error = {"message": message}
    if details is not None:
        error["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content={"error": error})


def status_for(exc: ImotError) -> int:
    for exc_type, status_code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request", details=exc.errors())

    @app.exception_handler(ImotError)
    async def domain_exception_handler(request: Request, exc: ImotError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(status_code, exc.message, details=exc.details)


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    """Crear la aplicación; los tests pasan un contenedor con dobles"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services.store.init_schema()
        logger.info("Database tables initialized")
        yield

    app = FastAPI(title="Imot Valuation API", version=__version__, lifespan=lifespan)
    app.state.services = services or build_services()

    # Configurar CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(maps_router)
    app.include_router(properties_router)
    app.include_router(documents_router)
    app.include_router(evaluations_router)
    app.include_router(valuations_router)
    app.include_router(photos_router)

    @app.get("/")
    async def root():
        """Endpoint raíz"""
        return {"message": "Imot Valuation API is running", "timestamp": get_local_now(), "version": __version__}

    @app.get("/health")
    async def health():
        """Endpoint de healthcheck para Docker"""
        return {"status": "healthy", "timestamp": get_local_now()}

    return app
