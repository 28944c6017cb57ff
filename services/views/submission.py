from __future__ import annotations

import logging
from dataclasses import dataclass

from core.errors import NotFoundError, PortalError, RemoteCallError, ValidationError
from domain.capabilities import Capability
from domain.models import Application, Service
from domain.workflow import submission_notification
from services.session import AppContext

logger = logging.getLogger(__name__)


@dataclass
class DocumentSlot:
    name: str
    filename: str | None = None

    @property
    def filled(self) -> bool:
        return bool(self.filename)


class ApplicationFormView:
    """Apply for one service: one upload slot per required document."""

    def __init__(self, ctx: AppContext, service_id: str):
        self.ctx = ctx
        self.service_id = service_id
        self.service: Service | None = None
        self.slots: list[DocumentSlot] = []
        self.notes = ""
        self.loading = False
        self.submitting = False

    def load(self) -> Service | None:
        if not self.ctx.connected or self.ctx.user is None:
            return None
        self.loading = True
        try:
            service = self.ctx.repo.get_service(self.service_id)
            if service is None:
                raise NotFoundError("Service", self.service_id)
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load service details")
            return None
        finally:
            self.loading = False
        self.service = service
        self.slots = [DocumentSlot(name) for name in service.documents_required]
        return service

    def attach(self, slot: int | str, filename: str | None) -> None:
        """Choose (or clear, with None) the file for a slot, by index or document name."""
        if isinstance(slot, str):
            matches = [s for s in self.slots if s.name == slot]
            if not matches:
                raise KeyError(slot)
            matches[0].filename = filename
        else:
            self.slots[slot].filename = filename

    @property
    def missing_documents(self) -> list[str]:
        return [s.name for s in self.slots if not s.filled]

    def submit(self) -> Application | None:
        """Insert the application, then notify the applicant.

        Only the document names are recorded. A failed notification insert
        is logged and leaves the application in place.
        """
        try:
            self.ctx.require_connected()
            user = self.ctx.require(Capability.APPLY)
            if self.service is None:
                raise ValidationError("Cannot submit application. Please try again later.")
            missing = self.missing_documents
            if missing:
                raise ValidationError(
                    f"Please upload all required documents: {', '.join(missing)}",
                    details={"missing": missing},
                )
        except PortalError as e:
            self.ctx.notices.fail(e)
            return None

        self.submitting = True
        try:
            app = self.ctx.repo.create_application(
                user_id=user.id,
                service_id=self.service.id,
                notes=self.notes,
                documents=[s.name for s in self.slots],
            )
        except RemoteCallError as e:
            self.ctx.notices.fail(e, "Failed to submit application")
            self.submitting = False
            return None

        title, message = submission_notification(self.service.name)
        try:
            self.ctx.repo.create_notification(user.id, title, message)
        except PortalError as e:
            logger.error("error creating notification for application %s: %s", app.id, e.message)

        self.submitting = False
        self.ctx.notices.success("Application submitted successfully")
        app.service = self.service
        return app
