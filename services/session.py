"""
Session / identity provider.

``AppContext`` is built once per UI session (or per API request) and handed
to every view. It owns the connectivity state, the signed-in profile, the
request cache and the notice board.

Lifecycle: init -> ready | error -> disposed (after sign-out).
"""

from __future__ import annotations

import logging
from typing import Callable

from core.config import Settings, settings
from core.errors import (
    AuthenticationError,
    ConnectivityError,
    PermissionDeniedError,
    PortalError,
    RemoteCallError,
    ValidationError,
)
from domain.capabilities import Capability, has_capability
from domain.models import ConnectionState, Lifecycle, Profile, Role
from services.notices import NoticeBoard
from services.persistence.cache import QueryCache
from services.persistence.repository import PortalRepository
from services.persistence.supabase import AuthSession, SupabaseGateway

logger = logging.getLogger(__name__)

DB_UNREACHABLE = "Unable to connect to the database. Please try again later."
NETWORK_ERROR = "Network error. Please check your connection and try again."
SELF_SERVICE_FIELDS = {"name", "phone", "address"}


class AppContext:
    def __init__(
        self,
        gateway: SupabaseGateway,
        *,
        cfg: Settings = settings,
        cache: QueryCache | None = None,
        notices: NoticeBoard | None = None,
    ):
        self.gateway = gateway
        self.settings = cfg
        self.cache = cache or QueryCache(maxsize=cfg.CACHE_MAXSIZE, ttl_seconds=cfg.CACHE_TTL_S)
        self.repo = PortalRepository(gateway, self.cache)
        self.notices = notices or NoticeBoard()

        self.connection = ConnectionState.CHECKING
        self.lifecycle = Lifecycle.INIT
        self.user: Profile | None = None
        self.access_token: str | None = None
        self._unsubscribe: Callable[[], None] | None = None

    # --- lifecycle ------------------------------------------------------------

    def initialize(self, subscribe: bool = True) -> "AppContext":
        """Probe connectivity, restore any existing session, listen for auth changes."""
        self.connection = ConnectionState.CHECKING
        if not self.gateway.probe():
            self.connection = ConnectionState.ERROR
            self.lifecycle = Lifecycle.ERROR
            self.notices.error(DB_UNREACHABLE, ConnectivityError(DB_UNREACHABLE))
            return self

        self.connection = ConnectionState.CONNECTED
        try:
            session = self.gateway.get_session()
            if session is not None:
                self._adopt(session)
        except PortalError as e:
            logger.error("session check error: %s", e.message)

        if subscribe:
            self._unsubscribe = self.gateway.on_auth_state_change(self._on_auth_change)
        self.lifecycle = Lifecycle.READY
        return self

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _dispose(self) -> None:
        self.user = None
        self.access_token = None
        self.cache.clear()
        self.lifecycle = Lifecycle.DISPOSED

    def _adopt(self, session: AuthSession) -> None:
        self.access_token = session.access_token
        self._load_profile(session.user_id)

    def _load_profile(self, user_id: str) -> None:
        try:
            profile = self.repo.get_profile(user_id)
        except PortalError as e:
            logger.error("error fetching profile %s: %s", user_id, e.message)
            return
        if profile is not None:
            self.user = profile

    def _on_auth_change(self, event: str, session: AuthSession | None) -> None:
        logger.debug("auth state change: %s", event)
        if session is not None:
            self._adopt(session)
            self.lifecycle = Lifecycle.READY
        else:
            self._dispose()

    # --- guards ---------------------------------------------------------------

    @property
    def connected(self) -> bool:
        return self.connection is ConnectionState.CONNECTED

    def require_connected(self) -> None:
        if not self.connected:
            raise ConnectivityError()

    def require_user(self) -> Profile:
        if self.user is None:
            raise AuthenticationError()
        return self.user

    def require(self, capability: Capability) -> Profile:
        user = self.require_user()
        if not has_capability(user, capability):
            raise PermissionDeniedError(f"{user.role.value} accounts cannot {capability.value.replace('_', ' ')}")
        return user

    def can(self, capability: Capability) -> bool:
        return has_capability(self.user, capability)

    # --- auth operations ------------------------------------------------------

    def sign_in(self, email: str, password: str) -> bool:
        try:
            self.require_connected()
            if not email.strip() or not password:
                raise ValidationError("Please enter your email and password")
            session = self.gateway.sign_in(email.strip(), password)
            self._adopt(session)
        except RemoteCallError as e:
            if "Invalid login credentials" in e.reason:
                self.notices.fail(e, "Invalid email or password")
            elif "network" in e.reason.lower():
                self.notices.fail(e, NETWORK_ERROR)
            else:
                self.notices.fail(e, e.reason or "Failed to sign in")
            return False
        except PortalError as e:
            self.notices.fail(e)
            return False
        self.lifecycle = Lifecycle.READY
        self.notices.success("Signed in successfully!")
        return True

    def validate_registration(self, email: str, password: str, name: str) -> None:
        if not name.strip():
            raise ValidationError("Please enter a name")
        if not email.strip():
            raise ValidationError("Please enter an email")
        if len(password) < self.settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {self.settings.MIN_PASSWORD_LENGTH} characters long"
            )

    def sign_up(self, email: str, password: str, name: str, role: Role | str = Role.CITIZEN) -> bool:
        role = Role(role)
        try:
            self.require_connected()
            self.validate_registration(email, password, name)
            if self.repo.find_profile_by_email(email.strip()) is not None:
                raise ValidationError("An account with this email already exists")
            result = self.gateway.sign_up(
                email.strip(),
                password,
                {"name": name.strip(), "role": role.value},
                redirect_to=self.settings.EMAIL_REDIRECT_TO,
            )
        except RemoteCallError as e:
            if "network" in e.reason.lower():
                self.notices.fail(e, NETWORK_ERROR)
            elif "password" in e.reason.lower():
                self.notices.fail(
                    e, f"Password should be at least {self.settings.MIN_PASSWORD_LENGTH} characters long."
                )
            else:
                self.notices.fail(e, e.reason or "Failed to create account")
            return False
        except PortalError as e:
            self.notices.fail(e)
            return False

        self.cache.invalidate("profiles")
        if result.user_id and not result.has_session:
            self.notices.success("Account created! Please check your email to confirm your account.")
        else:
            self.notices.success("Account created successfully!")
        logger.info("account created for %s (%s)", email.strip(), role.value)
        return True

    def sign_out(self) -> bool:
        try:
            self.require_connected()
            self.gateway.sign_out()
        except RemoteCallError as e:
            self.notices.fail(e, "Failed to sign out. Please try again.")
            return False
        except PortalError as e:
            self.notices.fail(e)
            return False
        self._dispose()
        self.notices.success("Signed out successfully")
        return True

    def update_profile(self, **fields) -> bool:
        try:
            self.require_connected()
            user = self.require_user()
            unknown = set(fields) - SELF_SERVICE_FIELDS
            if unknown:
                raise ValidationError(f"Cannot update: {', '.join(sorted(unknown))}")
            if "name" in fields and not (fields["name"] or "").strip():
                raise ValidationError("Name is required")
            self.repo.update_profile(user.id, fields)
        except RemoteCallError as e:
            self.notices.fail(e, "Failed to update profile")
            return False
        except PortalError as e:
            self.notices.fail(e)
            return False
        self._load_profile(user.id)
        self.notices.success("Profile updated successfully")
        return True
