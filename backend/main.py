# backend/main.py
from http import HTTPStatus
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from auth import GitHubOAuthClient
from config import Settings
from database import build_engine, build_session_maker, create_db_and_tables
from errors import BusinessError, GrowtimeError
from logger import configure_logging, get_logger
from routers import auth as auth_router, notes as notes_router, users as users_router

logger = get_logger(__name__)


def error_response(status_code: int, code: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"code": code, "message": message}}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GrowtimeError)
    async def growtime_error_handler(request: Request, exc: GrowtimeError):
        if isinstance(exc, BusinessError):
            logger.warning("Business error", code=exc.code, message=exc.message, path=request.url.path)
        else:
            logger.error("Request failed", code=exc.code, error_type=type(exc).__name__, path=request.url.path)
        return error_response(exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        else:
            message = "Invalid request"
        logger.warning("Request validation failed", path=request.url.path, message=message)
        return error_response(400, "VALIDATION_ERROR", message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        try:
            code = HTTPStatus(exc.status_code).name
        except ValueError:
            code = "HTTP_ERROR"
        return error_response(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error", path=request.url.path)
        return error_response(500, "INTERNAL_SERVER_ERROR", "An internal server error occurred.")


def create_app(settings: Optional[Settings] = None, github_client: Optional[GitHubOAuthClient] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.debug)
    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up and creating database tables...")
        await create_db_and_tables(engine)
        logger.info("Startup complete.")
        yield
        await engine.dispose()

    app = FastAPI(title="growtime", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    app.state.github = github_client or GitHubOAuthClient(settings)

    app.add_middleware(
        CORSMiddleware, allow_origins=[settings.client_url], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(notes_router.router)
    app.include_router(users_router.router)

    @app.get("/")
    async def read_root():
        return {"message": "growtime backend is running!"}

    return app


app = create_app()
