"""Storefront FastAPI application.

Serves the cart and checkout of one shopper over HTTP. Every request runs
inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ValidationError

from storefront.api import cart_router, checkout_router
from storefront.config import get_settings
from storefront.container import Storefront, build_storefront
from storefront.domain import storefront as storefront_domain
from storefront.gateway.port import ServiceError
from storefront.utils.logging import add_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied.
storefront_domain.init()


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": exc.messages})


async def _invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": str(exc)})


async def _service_error(request: Request, exc: ServiceError) -> JSONResponse:
    logger.warning("Backend service error", path=request.url.path, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=502, content={"error": exc.message})


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
def create_app(storefront: Storefront | None = None) -> FastAPI:
    """Build the application. Pass ``storefront`` to use a pre-wired container."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "storefront", None) is None:
            settings = get_settings()
            configure_logging(settings.log_dir)
            app.state.storefront = build_storefront(settings)
        yield
        await app.state.storefront.aclose()

    app = FastAPI(
        title="Storefront API",
        description="Shopping cart and checkout",
        lifespan=lifespan,
    )
    app.state.storefront = storefront

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context and bind request context for logging."""
        clear_context()
        add_context(path=request.url.path, buyer_id=request.headers.get("x-user-id"))
        with storefront_domain.domain_context():
            return await call_next(request)

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(InvalidOperationError, _invalid_operation)
    app.add_exception_handler(ServiceError, _service_error)

    app.include_router(cart_router)
    app.include_router(checkout_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": {"name": storefront_domain.name}})

    return app


app = create_app()
