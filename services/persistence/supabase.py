from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from supabase import Client, ClientOptions, create_client

from core.config import Settings, settings
from core.errors import RemoteCallError
from core.security import user_id_from_token

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    access_token: str | None = None


@dataclass(frozen=True)
class SignUpResult:
    user_id: str | None
    has_session: bool


class SupabaseGateway:
    """
    Thin wrapper over the supabase client: auth calls, table reads/writes and
    the connectivity probe. Every call is one round trip; every failure comes
    out as ``RemoteCallError``.
    """

    def __init__(self, client: Client, access_token: str | None = None):
        self._client = client
        self._access_token = access_token

    @classmethod
    def from_settings(cls, cfg: Settings = settings, access_token: str | None = None) -> "SupabaseGateway":
        options = ClientOptions(auto_refresh_token=access_token is None, persist_session=access_token is None)
        client = create_client(cfg.SUPABASE_URL, cfg.SUPABASE_KEY, options=options)
        if access_token:
            # row-level access rules evaluate against the caller, not the anon key
            client.postgrest.auth(access_token)
        return cls(client, access_token=access_token)

    # --- connectivity -------------------------------------------------------

    def probe(self) -> bool:
        try:
            self._client.table("services").select("id").limit(1).execute()
        except Exception as e:  # noqa: BLE001
            msg = str(e)
            if "does not exist" in msg:
                logger.error("services table does not exist; database might not be initialized")
            else:
                logger.error("supabase connection test failed: %s", msg)
            return False
        logger.info("supabase connection successful")
        return True

    # --- auth ---------------------------------------------------------------

    def get_session(self) -> AuthSession | None:
        if self._access_token:
            return AuthSession(user_id_from_token(self._access_token), self._access_token)
        try:
            session = self._client.auth.get_session()
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError("get session", str(e)) from e
        if session is None or session.user is None:
            return None
        return AuthSession(session.user.id, session.access_token)

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            res = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError("sign in", str(e)) from e
        if res.user is None:
            raise RemoteCallError("sign in", "no user returned")
        token = res.session.access_token if res.session else None
        return AuthSession(res.user.id, token)

    def sign_up(self, email: str, password: str, metadata: Row, redirect_to: str | None = None) -> SignUpResult:
        options: Row = {"data": metadata}
        if redirect_to:
            options["email_redirect_to"] = redirect_to
        try:
            res = self._client.auth.sign_up({"email": email, "password": password, "options": options})
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError("sign up", str(e)) from e
        return SignUpResult(res.user.id if res.user else None, res.session is not None)

    def sign_out(self) -> None:
        try:
            self._client.auth.sign_out()
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError("sign out", str(e)) from e

    def on_auth_state_change(self, callback: Callable[[str, AuthSession | None], None]) -> Callable[[], None]:
        """Subscribe to auth events; returns the unsubscribe function."""

        def _relay(event, session) -> None:
            user = getattr(session, "user", None)
            callback(str(event), AuthSession(user.id, session.access_token) if user else None)

        subscription = self._client.auth.on_auth_state_change(_relay)
        return subscription.unsubscribe

    # --- tables -------------------------------------------------------------

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Row | None = None,
        in_: tuple[str, Iterable[Any]] | None = None,
        not_null: str | None = None,
        order: str | None = None,
        desc: bool = False,
        limit: int | None = None,
        single: bool = False,
    ) -> list[Row] | Row | None:
        q = self._client.table(table).select(columns)
        for col, val in (eq or {}).items():
            q = q.eq(col, val)
        if in_ is not None:
            q = q.in_(in_[0], list(in_[1]))
        if not_null is not None:
            q = q.not_.is_(not_null, "null")
        if order is not None:
            q = q.order(order, desc=desc)
        if limit is not None:
            q = q.limit(limit)
        if single:
            q = q.maybe_single()
        try:
            res = q.execute()
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError(f"select {table}", str(e)) from e
        if single:
            # maybe_single() yields no response object at all on zero rows
            return res.data if res is not None else None
        return res.data or []

    def insert(self, table: str, row: Row) -> Row:
        try:
            res = self._client.table(table).insert(row).execute()
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError(f"insert {table}", str(e)) from e
        data = res.data or []
        return data[0] if data else row

    def update(self, table: str, values: Row, *, eq: Row) -> list[Row]:
        q = self._client.table(table).update(values)
        for col, val in eq.items():
            q = q.eq(col, val)
        try:
            res = q.execute()
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError(f"update {table}", str(e)) from e
        return res.data or []

    def delete(self, table: str, *, eq: Row) -> None:
        q = self._client.table(table).delete()
        for col, val in eq.items():
            q = q.eq(col, val)
        try:
            q.execute()
        except Exception as e:  # noqa: BLE001
            raise RemoteCallError(f"delete {table}", str(e)) from e
