import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.errors import (
    Forbidden,
    MissingReasonError,
    NoClientAssigned,
    NotFound,
    PolicyError,
    TransportError,
)
from core.logging_config import logger
from core.notifications import shutdown_notifications

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.permissions import router as permissions_router
from routers.work_orders import router as work_orders_router
from routers.files import router as files_router
from routers.client_hub import router as client_hub_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Permissions, job lifecycle and the Client Hub for field service work orders",
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
    # Startup logging
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"🚀 Starting {settings.PROJECT_NAME} ({settings.ENV})")
        for route in app.routes:
            path = getattr(route, "path", None)
            if not path:
                continue
            methods = ",".join(getattr(route, "methods", None) or [])
            logger.debug(f"➡️ {methods:10s} {path}")

    @app.on_event("shutdown")
    async def on_shutdown():
        shutdown_notifications()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url} — {exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # Domain errors. Starlette resolves handlers through the MRO,
    # so the PolicyError handler only catches what the others don't.
    @app.exception_handler(Forbidden)
    async def handle_forbidden(request: Request, exc: Forbidden):
        logger.warning(f"HTTP 403 at {request.url}: {exc.message}")
        return JSONResponse(status_code=403, content={"detail": exc.message})

    @app.exception_handler(MissingReasonError)
    async def handle_missing_reason(request: Request, exc: MissingReasonError):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "target_status": str(exc.target_status)},
        )

    @app.exception_handler(NoClientAssigned)
    async def handle_no_client(request: Request, exc: NoClientAssigned):
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(PolicyError)
    async def handle_policy(request: Request, exc: PolicyError):
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(NotFound)
    async def handle_not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(TransportError)
    async def handle_transport(request: Request, exc: TransportError):
        logger.error(f"Upstream failure at {request.url}: {exc.message}")
        return JSONResponse(status_code=502, content={"detail": exc.operation})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(permissions_router)
    app.include_router(work_orders_router)
    app.include_router(files_router)
    app.include_router(client_hub_router)

    # Health
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
