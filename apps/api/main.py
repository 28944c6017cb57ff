# apps/api/main.py

import logging
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.api.routers import applications, auth, review, services
from core.config import settings
from core.errors import PortalError
from core.logging import configure_logging
from services.persistence.supabase import SupabaseGateway

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[str | None], SupabaseGateway]


def _supabase_gateway(token: str | None) -> SupabaseGateway:
    return SupabaseGateway.from_settings(settings, access_token=token)


def create_app(gateway_factory: GatewayFactory | None = None) -> FastAPI:
    """Build the portal API; ``gateway_factory`` maps a bearer token to a data gateway."""
    configure_logging()
    app = FastAPI(title="E-Gram Panchayat API", version="0.1.0")
    app.state.gateway_factory = gateway_factory or _supabase_gateway
    # admin user id -> service ids armed for deletion
    app.state.armed_deletes = {}
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.http_status >= 500:
            logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == 401 else None
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict(), headers=headers)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        connected = app.state.gateway_factory(None).probe()
        return {"status": "ok", "database": "connected" if connected else "error"}

    app.include_router(auth.router)
    app.include_router(services.router)
    app.include_router(applications.router)
    app.include_router(review.router)
    return app


app = create_app()
