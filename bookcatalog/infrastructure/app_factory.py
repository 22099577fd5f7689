from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Dict, List, Optional

import anyio
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ..modules.common.utils.error_handler import register_exception_handlers
from .config.settings import (
    DatabaseSettings,
    EnvironmentOption,
    EnvironmentSettings,
    Settings,
    get_settings,
)
from .database.session import create_tables
from .logging import get_logger
from .middleware import OriginAllowListMiddleware, RequestContextMiddleware

logger = get_logger(__name__)


async def set_threadpool_tokens(number_of_tokens: int = 100) -> None:
    """Configure the number of threadpool tokens for anyio."""
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = number_of_tokens


def lifespan_factory(
    settings: Settings,
    create_tables_on_startup: bool = True,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Factory to create a lifespan async context manager for a FastAPI app.

    Args:
        settings: Application settings
        create_tables_on_startup: Whether to create database tables on startup

    Returns:
        An async context manager for FastAPI's lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        await set_threadpool_tokens()

        if isinstance(settings, DatabaseSettings) and create_tables_on_startup:
            await create_tables()
            logger.info("Database tables ready", extra={"backend": settings.DATABASE_BACKEND.value})

        yield

    return lifespan


def _option(explicit: Any, settings: Settings, name: str, default: Any) -> Any:
    """An explicit argument wins, then the settings attribute, then the default."""
    if explicit is not None:
        return explicit
    return getattr(settings, name, default)


def _split(value: Any) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


def create_application(
    router: APIRouter,
    settings: Optional[Settings] = None,
    lifespan: Optional[Callable[[FastAPI], AbstractAsyncContextManager[None]]] = None,
    create_tables_on_startup: Optional[bool] = None,
    enable_cors: Optional[bool] = None,
    cors_origins: Optional[List[str]] = None,
    enable_docs_in_production: Optional[bool] = None,
    enable_gzip: Optional[bool] = None,
    title: Optional[str] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    **kwargs: Any,
) -> FastAPI:
    """Creates and configures a FastAPI application based on the provided settings.

    Besides mounting ``router`` this wires the global domain exception
    handlers, the request correlation middleware, and when CORS is enabled
    both the browser CORS headers and the hard origin allow-list for the
    API prefix.

    Args:
        router: The APIRouter containing the routes for the application
        settings: Application settings (uses get_settings() if None)
        lifespan: Optional lifespan function for the FastAPI app. If None, uses lifespan_factory.
        create_tables_on_startup: Whether to create database tables on startup.
            Defaults to settings.CREATE_TABLES_ON_STARTUP if None.
        enable_cors: Whether to enable CORS handling.
            Defaults to settings.CORS_ENABLED if None.
        cors_origins: List of allowed origins.
            Defaults to settings.CORS_ORIGINS_LIST if None.
        enable_docs_in_production: Whether to enable API docs in production.
            Defaults to settings.ENABLE_DOCS_IN_PRODUCTION if None.
        enable_gzip: Whether to enable GZip compression middleware.
            Defaults to settings.GZIP_ENABLED if None.
        title: The title of the API.
        summary: A short summary of the API.
        description: A detailed description of the API (supports Markdown).
        version: The version of the API.
        **kwargs: Additional keyword arguments passed to FastAPI constructor

    Returns:
        A configured FastAPI application
    """

    if settings is None:
        settings = get_settings()

    _create_tables_on_startup = _option(create_tables_on_startup, settings, "CREATE_TABLES_ON_STARTUP", True)
    _enable_cors = _option(enable_cors, settings, "CORS_ENABLED", True)
    _cors_origins: List[str] = _option(cors_origins, settings, "CORS_ORIGINS_LIST", [])
    _enable_docs_in_production = _option(enable_docs_in_production, settings, "ENABLE_DOCS_IN_PRODUCTION", False)
    _enable_gzip = _option(enable_gzip, settings, "GZIP_ENABLED", True)

    metadata: Dict[str, Any] = {
        "title": _option(title, settings, "APP_NAME", "Book Catalog API"),
        "version": _option(version, settings, "VERSION", "0.1.0"),
        "description": _option(description, settings, "APP_DESCRIPTION", ""),
        "debug": getattr(settings, "DEBUG", False),
        "docs_url": getattr(settings, "DOCS_URL", "/docs"),
        "redoc_url": getattr(settings, "REDOC_URL", "/redoc"),
        "openapi_url": getattr(settings, "OPENAPI_URL", "/openapi.json"),
    }
    if summary is not None:
        metadata["summary"] = summary

    in_production = (
        isinstance(settings, EnvironmentSettings) and settings.ENVIRONMENT == EnvironmentOption.PRODUCTION
    )
    if in_production and not _enable_docs_in_production:
        metadata.update({"docs_url": None, "redoc_url": None, "openapi_url": None})

    kwargs.update(metadata)

    if lifespan is None:
        lifespan = lifespan_factory(settings, create_tables_on_startup=_create_tables_on_startup)

    application = FastAPI(lifespan=lifespan, **kwargs)

    register_exception_handlers(application)
    application.include_router(router)

    # Middleware added last runs first: correlation -> allow-list -> CORS -> gzip.
    if _enable_gzip:
        application.add_middleware(GZipMiddleware, minimum_size=getattr(settings, "GZIP_MINIMUM_SIZE", 1000))

    if _enable_cors:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=getattr(settings, "CORS_ALLOW_CREDENTIALS", True),
            allow_methods=_split(getattr(settings, "CORS_ALLOW_METHODS", "*")),
            allow_headers=_split(getattr(settings, "CORS_ALLOW_HEADERS", "*")),
        )
        application.add_middleware(
            OriginAllowListMiddleware,
            allow_origins=_cors_origins,
            path_prefix=getattr(settings, "API_PREFIX", "/api"),
        )

    application.add_middleware(
        RequestContextMiddleware,
        log_timing=getattr(settings, "LOG_PERFORMANCE_METRICS", False),
    )

    return application
