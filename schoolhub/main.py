"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers. Settings are
resolved inside create_app() so tests can set the environment first.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from schoolhub.api.v1 import api_router
from schoolhub.core.config import get_settings
from schoolhub.core.exception_handlers import register_exception_handlers
from schoolhub.core.lifespan import create_lifespan
from schoolhub.core.limiter import limiter
from schoolhub.middleware import AuditLogMiddleware, RequestIDMiddleware
from schoolhub.shared.request_audit import API_PREFIX


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Last added = outermost: CORS -> request ID -> audit -> routes.
    app.add_middleware(
        AuditLogMiddleware,
        enabled=settings.audit_enabled,
        excluded_prefixes=settings.audit_excluded_prefixes,
        max_body_bytes=settings.audit_max_body_bytes,
        tenant_header_name=settings.tenant_header_name,
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=API_PREFIX)
    return app


app = create_app()
