import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.config import Settings, get_settings
from core.errors import (
    AppError, PersistenceError, RequestTimeoutError, ValidationError, format_violations,
)
from core.logging import configure_logging
from database.database import Database
from database.migrations import ensure_current
from routes import chats, messages, users

configure_logging()
logger = logging.getLogger(__name__)

READ_ONLY_METHODS = {"GET", "HEAD", "OPTIONS"}


def _internal_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"message": "Something went wrong!", "error": str(exc)},
    )


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # an injected database belongs to the caller, who disposes it
        owned = database is None
        db = database or Database(settings.database_url, echo=settings.sql_echo)
        ensure_current(db.engine)
        app.state.database = db
        logger.info("Database schema is current, serving requests")
        try:
            yield
        finally:
            if owned:
                db.dispose()

    app = FastAPI(title="Chat Store API", lifespan=lifespan)

    @app.middleware("http")
    async def request_guard(request: Request, call_next):
        # writes are never cut off here: their deadline is enforced before commit
        timeout = settings.request_timeout_seconds
        request.state.deadline = time.monotonic() + timeout
        try:
            if request.method in READ_ONLY_METHODS:
                return await asyncio.wait_for(call_next(request), timeout=timeout)
            return await call_next(request)
        except asyncio.TimeoutError:
            logger.warning("Request %s %s timed out", request.method, request.url.path)
            error = RequestTimeoutError()
            return JSONResponse(status_code=error.status_code, content=error.to_body())
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return _internal_error(exc)

    # added last so it wraps every response, errors included
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationError(format_violations(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        error = PersistenceError(error=str(getattr(exc, "orig", None) or exc))
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    # last resort for anything escaping request_guard; the server logs the traceback
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return _internal_error(exc)

    app.include_router(users.router)
    app.include_router(chats.router)
    app.include_router(messages.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
