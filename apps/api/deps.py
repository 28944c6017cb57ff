from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from core.config import settings
from core.errors import AuthenticationError, ConnectivityError, PortalError
from services.session import AppContext

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def get_settings():
    """Provides application settings/config globally."""
    return settings


def _build_context(request: Request, token: str | None) -> AppContext:
    gateway = request.app.state.gateway_factory(token)
    # one request, one context: no auth-change listener
    return AppContext(gateway, cfg=get_settings()).initialize(subscribe=False)


def get_public_context(request: Request, token: str | None = Depends(optional_oauth2_scheme)) -> AppContext:
    """Context for public pages; signed in when a bearer token is sent."""
    return _build_context(request, token)


def get_context(request: Request, token: str = Depends(oauth2_scheme)) -> AppContext:
    """Context for pages that need a signed-in, reachable backend."""
    ctx = _build_context(request, token)
    if not ctx.connected:
        raise ConnectivityError()
    if ctx.user is None:
        raise AuthenticationError("invalid or expired token")
    return ctx


def ensure(ok, ctx: AppContext):
    """Turn a view's failure notice into the matching HTTP error."""
    if ok:
        return ok
    notice = ctx.notices.last_error
    if notice is None:
        raise PortalError("request failed")
    if notice.error is None:
        raise PortalError(notice.message)
    err = notice.error
    err.message = notice.message
    raise err
