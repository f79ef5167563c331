import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import (
    AccessRedirect,
    AuthError,
    ConstraintError,
    InvalidTransitionError,
    RemoteMutationError,
    UploadError,
    handle_supabase_error,
)
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers import api_router
from routers.fallback import router as fallback_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="RentProp API: rooms, tenants, maintenance and payments on Supabase",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup: config check + route log
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup(strict=settings.ENV == "production")
        for route in app.routes:
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            logger.debug(f"{methods:10s} {getattr(route, 'path', '')}")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(AccessRedirect)
    async def handle_redirect(request: Request, exc: AccessRedirect):
        return RedirectResponse(exc.target, status_code=303)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ConstraintError)
    async def handle_constraint(request: Request, exc: ConstraintError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(InvalidTransitionError)
    async def handle_transition(request: Request, exc: InvalidTransitionError):
        return JSONResponse(
            status_code=409,
            content={"detail": str(exc), "current": exc.current, "requested": exc.requested},
        )

    @app.exception_handler(UploadError)
    async def handle_upload(request: Request, exc: UploadError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AuthError)
    async def handle_auth(request: Request, exc: AuthError):
        return JSONResponse(status_code=401, content={"detail": exc.user_message})

    @app.exception_handler(RemoteMutationError)
    async def handle_remote(request: Request, exc: RemoteMutationError):
        http_exc = handle_supabase_error(exc, exc.operation)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers (catch-all fallback last)
    # -------------------------------------------------
    app.include_router(api_router)
    app.include_router(fallback_router)

    return app


# Create the global FastAPI instance
app = create_app()
