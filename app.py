from __future__ import annotations

# Standard library
import sys
import logging as _logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

# Third-party
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Local application imports
from api.users import router as users_router
from domain.user.core.ports.user_repository import IUserRepository
from domain.user.core.exceptions.user_errors import RepositoryError
from infrastructure.config import (
    ConfigurationError,
    get_app_version,
    get_log_level,
    get_repository_backend,
    get_server_host,
    get_server_port,
    load_environment,
    require_mongodb_uri,
)
from infrastructure.user.mongo_user_repository import MongoUserRepository
from infrastructure.user.repository_factory import create_user_repository

load_environment()

# --- Basic logging configuration (minimal) ---
_LOG_LEVEL = get_log_level()
_logging.basicConfig(
    level=getattr(_logging, _LOG_LEVEL, _logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

for _ln in ("startup", "api.users"):
    _lg = _logging.getLogger(_ln)
    if _lg.level == 0:  # not set explicitly
        _lg.setLevel(getattr(_logging, _LOG_LEVEL, _logging.INFO))

APP_VERSION = get_app_version()

__all__ = ["app", "create_app", "lifespan", "main"]


async def _check_store(repository: IUserRepository, logger: _logging.Logger) -> None:
    """Connectivity check at startup. Failure is logged, not fatal."""
    try:
        await repository.ping()
        if isinstance(repository, MongoUserRepository):
            await repository.ensure_indexes()
    except RepositoryError as e:
        logger.error("lifespan.store_unreachable error=%s", e, extra={"error": str(e)})
        return
    logger.info(
        "lifespan.store_connected repository=%s",
        type(repository).__name__,
        extra={"repository": type(repository).__name__},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifecycle: store handle creation, connectivity check, cleanup.

    STARTUP:
      - build the user repository from the environment, unless one was
        injected through create_app (tests)
      - ping the store; an unreachable store is logged and requests then
        fail individually with 500
    SHUTDOWN:
      - close the repository created here
    """
    logger = _logging.getLogger("startup")

    owned = getattr(app.state, "user_repository", None) is None
    if owned:
        try:
            app.state.user_repository = create_user_repository()
        except ConfigurationError as e:
            logger.error("lifespan.config_error error=%s", e, extra={"error": str(e)})
            raise
    repository: IUserRepository = app.state.user_repository

    logger.info(
        "lifespan.startup repository=%s owned=%s",
        type(repository).__name__,
        owned,
        extra={"repository": type(repository).__name__, "owned": owned},
    )
    await _check_store(repository, logger)

    logger.info("lifespan.ready", extra={"status": "serving"})
    try:
        yield
    finally:
        logger.info("lifespan.shutdown", extra={"status": "cleanup"})
        if owned:
            await repository.close()
            app.state.user_repository = None


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Body fields that cannot be coerced are cast failures, reported as 500."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(status_code=500, content={"message": "; ".join(parts)})


def create_app(repository: Optional[IUserRepository] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        repository: Store handle to use. When None the lifespan builds one
            from the environment (USER_REPOSITORY, MONGODB_URI).

    Returns:
        Configured FastAPI application
    """
    application = FastAPI(
        title="Clicker Backend",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    application.state.user_repository = repository

    # Cross-origin requests are accepted from anywhere
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(StarletteHTTPException, _http_error_handler)  # type: ignore[arg-type]
    application.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]

    @application.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @application.get("/version")
    async def version() -> dict[str, str]:
        return {"version": APP_VERSION}

    application.include_router(users_router)
    return application


app = create_app()


def check_startup_config() -> None:
    """Fail fast on configuration that makes serving impossible.

    Raises:
        ConfigurationError: Unknown USER_REPOSITORY, or mongodb selected
            without MONGODB_URI
    """
    if get_repository_backend() == "mongodb":
        require_mongodb_uri()


def main() -> None:
    """Console entry point: validate configuration and serve with uvicorn."""
    logger = _logging.getLogger("startup")
    try:
        check_startup_config()
        host, port = get_server_host(), get_server_port()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Server is running on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=_LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
