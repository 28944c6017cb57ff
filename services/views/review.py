"""
Staff/admin review board: every application, searchable and filterable,
with per-status counts and the status transition actions.
"""

from __future__ import annotations

import logging

from core.errors import NotFoundError, PortalError, RemoteCallError
from domain.capabilities import Capability
from domain.models import Application, ApplicationStatus
from domain.value_objects import StatusCounts
from domain.workflow import action_states, check_transition, status_notification
from services.session import AppContext
from services.views.applications import ALL, status_matches

logger = logging.getLogger(__name__)


def board_matches(app: Application, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    return (
        (app.service is not None and term in app.service.name.lower())
        or (app.applicant is not None and term in app.applicant.name.lower())
        or term in app.id.lower()
    )


class ReviewBoard:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.applications: list[Application] = []
        self.counts = StatusCounts()
        self.search_term = ""
        self.status_filter = ALL
        self.selected: Application | None = None
        self.loading = False
        self.processing = False

    def load(self) -> list[Application]:
        try:
            self.ctx.require(Capability.PROCESS_APPLICATIONS)
        except PortalError as e:
            self.ctx.notices.fail(e)
            return []
        if not self.ctx.connected:
            return []
        self.loading = True
        try:
            self.applications = self.ctx.repo.list_applications(with_applicant=True)
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load applications")
        finally:
            self.loading = False
        self.counts = StatusCounts.tally(a.status for a in self.applications)
        return self.applications

    @property
    def filtered(self) -> list[Application]:
        return [
            a
            for a in self.applications
            if board_matches(a, self.search_term) and status_matches(a, self.status_filter)
        ]

    def select(self, application_id: str | None) -> Application | None:
        self.selected = next((a for a in self.applications if a.id == application_id), None)
        return self.selected

    def actions(self, application: Application | None = None) -> list[dict]:
        app = application or self.selected
        if app is None:
            return []
        states = action_states(app.status)
        if self.processing:
            for s in states:
                s["enabled"] = False
        return states

    def _find(self, application_id: str) -> Application:
        for a in self.applications:
            if a.id == application_id:
                return a
        app = self.ctx.repo.get_application(application_id)
        if app is None:
            raise NotFoundError("Application", application_id)
        return app

    def transition(
        self,
        application_id: str,
        target: ApplicationStatus | str,
        notes: str | None = None,
    ) -> bool:
        """Move an application to ``target`` and notify its owner.

        The status update and the notification are separate writes; a failed
        notification is logged and the new status stays.
        """
        try:
            self.ctx.require_connected()
            staff = self.ctx.require(Capability.PROCESS_APPLICATIONS)
            target = ApplicationStatus(target)
            app = self._find(application_id)
            check_transition(app.status, target)
        except PortalError as e:
            self.ctx.notices.fail(e)
            return False

        self.processing = True
        try:
            self.ctx.repo.set_application_status(
                application_id,
                target,
                notes=notes if notes is not None else app.notes,
                processed_by=staff.id,
            )
        except RemoteCallError as e:
            self.ctx.notices.fail(e, "Failed to update application status")
            self.processing = False
            return False

        title, message = status_notification(target, app.service.name if app.service else None)
        try:
            self.ctx.repo.create_notification(app.user_id, title, message)
        except PortalError as e:
            logger.error("error creating notification for application %s: %s", application_id, e.message)

        self.processing = False
        self.selected = None
        self.ctx.notices.success(f"Application {target.label}")
        self.load()
        return True
