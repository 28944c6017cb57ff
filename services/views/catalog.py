"""
Service catalog: public listing + search, and admin create/update/delete.

One controller for every role; catalog management is gated on the
``manage_catalog`` capability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from core.errors import NotFoundError, PortalError, RemoteCallError, ValidationError
from domain.capabilities import Capability
from domain.models import Service
from services.persistence.placeholders import placeholder_service, placeholder_services
from services.session import AppContext

logger = logging.getLogger(__name__)


def matches(service: Service, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    return term in service.name.lower() or term in (service.description or "").lower()


@dataclass
class ServiceForm:
    name: str = ""
    description: str = ""
    documents_required: str = ""  # comma separated, as typed
    fee: Any = 0
    processing_time: str = ""

    @classmethod
    def from_service(cls, service: Service) -> "ServiceForm":
        return cls(
            name=service.name,
            description=service.description,
            documents_required=", ".join(service.documents_required),
            fee=service.fee or 0,
            processing_time=service.processing_time or "",
        )

    def to_values(self) -> dict[str, Any]:
        missing = [
            label
            for label, value in (
                ("name", self.name),
                ("description", self.description),
                ("processing time", self.processing_time),
            )
            if not str(value).strip()
        ]
        if missing:
            raise ValidationError(f"Please fill in: {', '.join(missing)}", details={"missing": missing})
        try:
            fee = float(self.fee)
        except (TypeError, ValueError) as e:
            raise ValidationError("Fee must be a number") from e
        if fee < 0:
            raise ValidationError("Fee cannot be negative")
        docs = [d.strip() for d in self.documents_required.split(",") if d.strip()]
        return {
            "name": self.name.strip(),
            "description": self.description.strip(),
            "documents_required": docs,
            "fee": fee,
            "processing_time": self.processing_time.strip(),
        }


class CatalogView:
    def __init__(self, ctx: AppContext, armed_deletes: set[str] | None = None):
        self.ctx = ctx
        self.services: list[Service] = []
        self.search_term = ""
        self.loading = False
        self.load_failed = False
        # shared with the caller when armed rows must outlive this view
        self.armed_deletes: set[str] = armed_deletes if armed_deletes is not None else set()

    @property
    def can_manage(self) -> bool:
        return self.ctx.can(Capability.MANAGE_CATALOG)

    @property
    def using_placeholders(self) -> bool:
        return not self.ctx.connected or self.load_failed

    def load(self) -> list[Service]:
        self.load_failed = False
        if not self.ctx.connected:
            self.services = []
            return self.displayed
        self.loading = True
        try:
            self.services = self.ctx.repo.list_services()
        except PortalError as e:
            self.load_failed = True
            self.ctx.notices.fail(e, "Failed to load services")
        finally:
            self.loading = False
        return self.displayed

    @property
    def displayed(self) -> list[Service]:
        return placeholder_services() if self.using_placeholders else self.services

    def search(self, term: str) -> list[Service]:
        self.search_term = term
        return self.filtered

    @property
    def filtered(self) -> list[Service]:
        return [s for s in self.displayed if matches(s, self.search_term)]

    def detail(self, service_id: str) -> Service:
        """One service by id; a placeholder when it cannot be fetched."""
        if not self.ctx.connected:
            return placeholder_service(service_id)
        try:
            service = self.ctx.repo.get_service(service_id)
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load service details")
            return placeholder_service(service_id)
        if service is None:
            self.ctx.notices.fail(NotFoundError("Service", service_id))
            return placeholder_service(service_id)
        return service

    # --- admin ----------------------------------------------------------------

    def _write(self, action, failure: str) -> bool:
        try:
            self.ctx.require_connected()
            self.ctx.require(Capability.MANAGE_CATALOG)
            action()
        except RemoteCallError as e:
            self.ctx.notices.fail(e, failure)
            return False
        except PortalError as e:
            self.ctx.notices.fail(e)
            return False
        return True

    def create(self, form: ServiceForm) -> bool:
        ok = self._write(lambda: self.ctx.repo.create_service(form.to_values()), "Failed to add service")
        if ok:
            self.ctx.notices.success("Service added successfully")
            self.load()
        return ok

    def update(self, service_id: str, form: ServiceForm) -> bool:
        ok = self._write(
            lambda: self.ctx.repo.update_service(service_id, form.to_values()), "Failed to update service"
        )
        if ok:
            self.ctx.notices.success("Service updated successfully")
            self.load()
        return ok

    def is_armed(self, service_id: str) -> bool:
        return service_id in self.armed_deletes

    def cancel_delete(self, service_id: str) -> None:
        self.armed_deletes.discard(service_id)

    def delete(self, service_id: str) -> bool:
        """First call arms the row, a second call on the same row deletes it.

        Returns True only when the service was actually deleted.
        """
        if service_id not in self.armed_deletes:
            if self._write(lambda: None, "Failed to delete service"):
                self.armed_deletes.add(service_id)
                self.ctx.notices.info("Click delete again to confirm")
            return False

        ok = self._write(lambda: self.ctx.repo.delete_service(service_id), "Failed to delete service")
        if ok:
            self.armed_deletes.discard(service_id)
            self.ctx.notices.success("Service deleted successfully")
            self.load()
        return ok
