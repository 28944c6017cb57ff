from __future__ import annotations

import logging
from typing import Any

from core.errors import RemoteCallError
from domain.models import (
    Application,
    ApplicationStatus,
    Notification,
    Profile,
    Service,
    StaffActivity,
    utcnow,
)
from services.persistence.cache import QueryCache, query_key
from services.persistence.supabase import Row, SupabaseGateway

logger = logging.getLogger(__name__)

PROFILES = "profiles"
SERVICES = "services"
APPLICATIONS = "applications"
NOTIFICATIONS = "notifications"


class PortalRepository:
    """
    Typed access to the four portal tables.

    Reads go through the request cache; every write invalidates the cached
    reads of the table it touched. Joins (application -> service, applicant)
    are composed here from per-table reads.
    """

    def __init__(self, gateway: SupabaseGateway, cache: QueryCache | None = None):
        self.gateway = gateway
        self.cache = cache or QueryCache()

    def _select(self, table: str, **params: Any):
        key = query_key(table, **params)
        return self.cache.get_or_load(key, lambda: self.gateway.select(table, **params))

    def _ids(self, ids) -> tuple[str, list[str]]:
        return "id", sorted({i for i in ids if i})

    # --- profiles -------------------------------------------------------------

    def get_profile(self, user_id: str) -> Profile | None:
        row = self._select(PROFILES, eq={"id": user_id}, single=True)
        return Profile(**row) if row else None

    def find_profile_by_email(self, email: str) -> Profile | None:
        row = self._select(PROFILES, eq={"email": email}, single=True)
        return Profile(**row) if row else None

    def profiles_by_ids(self, ids) -> dict[str, Profile]:
        col, wanted = self._ids(ids)
        if not wanted:
            return {}
        rows = self._select(PROFILES, in_=(col, wanted))
        return {r["id"]: Profile(**r) for r in rows}

    def update_profile(self, user_id: str, values: Row) -> None:
        self.gateway.update(PROFILES, values, eq={"id": user_id})
        self.cache.invalidate(PROFILES)

    # --- services -------------------------------------------------------------

    def list_services(self) -> list[Service]:
        return [Service(**r) for r in self._select(SERVICES, order="name")]

    def get_service(self, service_id: str) -> Service | None:
        row = self._select(SERVICES, eq={"id": service_id}, single=True)
        return Service(**row) if row else None

    def services_by_ids(self, ids) -> dict[str, Service]:
        col, wanted = self._ids(ids)
        if not wanted:
            return {}
        rows = self._select(SERVICES, in_=(col, wanted))
        return {r["id"]: Service(**r) for r in rows}

    def create_service(self, values: Row) -> Service:
        row = self.gateway.insert(SERVICES, values)
        self.cache.invalidate(SERVICES)
        logger.info("service created: %s", values.get("name"))
        return Service(**row) if "id" in row else Service(id="", **values)

    def update_service(self, service_id: str, values: Row) -> None:
        self.gateway.update(SERVICES, values, eq={"id": service_id})
        self.cache.invalidate(SERVICES)
        logger.info("service updated: %s", service_id)

    def delete_service(self, service_id: str) -> None:
        self.gateway.delete(SERVICES, eq={"id": service_id})
        self.cache.invalidate(SERVICES)
        logger.info("service deleted: %s", service_id)

    # --- applications ---------------------------------------------------------

    def _join(self, rows: list[Row], with_applicant: bool = False) -> list[Application]:
        apps = [Application(**r) for r in rows]
        services = self.services_by_ids(a.service_id for a in apps)
        profiles = self.profiles_by_ids(a.user_id for a in apps) if with_applicant else {}
        for a in apps:
            a.service = services.get(a.service_id)
            a.applicant = profiles.get(a.user_id)
        return apps

    def list_applications(
        self,
        user_id: str | None = None,
        limit: int | None = None,
        with_applicant: bool = False,
    ) -> list[Application]:
        """Newest first; all applications when ``user_id`` is None."""
        rows = self._select(
            APPLICATIONS,
            eq={"user_id": user_id} if user_id else None,
            order="created_at",
            desc=True,
            limit=limit,
        )
        return self._join(rows, with_applicant=with_applicant)

    def get_application(self, application_id: str, user_id: str | None = None) -> Application | None:
        eq = {"id": application_id}
        if user_id:
            eq["user_id"] = user_id
        row = self._select(APPLICATIONS, eq=eq, single=True)
        if not row:
            return None
        return self._join([row], with_applicant=True)[0]

    def create_application(self, user_id: str, service_id: str, notes: str, documents: list[str]) -> Application:
        values = {
            "user_id": user_id,
            "service_id": service_id,
            "status": ApplicationStatus.PENDING.value,
            "notes": notes,
            "documents": documents,
            "updated_at": utcnow().isoformat(),
        }
        row = self.gateway.insert(APPLICATIONS, values)
        self.cache.invalidate(APPLICATIONS)
        if "id" not in row:
            raise RemoteCallError(f"insert {APPLICATIONS}", "no row returned")
        app = Application(**row)
        logger.info("application %s created for service %s", app.id, service_id)
        return app

    def set_application_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        notes: str | None,
        processed_by: str,
    ) -> None:
        values = {
            "status": status.value,
            "notes": notes,
            "processed_by": processed_by,
            "updated_at": utcnow().isoformat(),
        }
        self.gateway.update(APPLICATIONS, values, eq={"id": application_id})
        self.cache.invalidate(APPLICATIONS)
        logger.info("application %s -> %s by %s", application_id, status.value, processed_by)

    def staff_activity(self) -> list[StaffActivity]:
        rows = self._select(
            APPLICATIONS,
            columns="id, status, created_at, processed_by",
            not_null="processed_by",
            order="created_at",
            desc=True,
        )
        staff = self.profiles_by_ids(r["processed_by"] for r in rows)
        return [
            StaffActivity(
                application_id=r["id"],
                status=r["status"],
                created_at=r["created_at"],
                processed_by=r["processed_by"],
                staff_name=staff[r["processed_by"]].name if r["processed_by"] in staff else "Unknown",
            )
            for r in rows
        ]

    # --- notifications --------------------------------------------------------

    def list_notifications(self, user_id: str, limit: int | None = None) -> list[Notification]:
        rows = self._select(
            NOTIFICATIONS, eq={"user_id": user_id}, order="created_at", desc=True, limit=limit
        )
        return [Notification(**r) for r in rows]

    def create_notification(self, user_id: str, title: str, message: str) -> None:
        self.gateway.insert(NOTIFICATIONS, {"user_id": user_id, "title": title, "message": message})
        self.cache.invalidate(NOTIFICATIONS)

    def mark_notification_read(self, notification_id: str, user_id: str) -> None:
        self.gateway.update(NOTIFICATIONS, {"is_read": True}, eq={"id": notification_id, "user_id": user_id})
        self.cache.invalidate(NOTIFICATIONS)
