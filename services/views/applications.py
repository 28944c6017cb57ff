from __future__ import annotations

from core.errors import NotFoundError, PortalError
from domain.models import Application, ApplicationStatus
from services.persistence.placeholders import placeholder_applications
from services.session import AppContext

ALL = "all"


def status_matches(app: Application, status_filter: str) -> bool:
    return status_filter == ALL or app.status == ApplicationStatus(status_filter)


class MyApplicationsView:
    """The signed-in citizen's applications, newest first."""

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.applications: list[Application] = []
        self.search_term = ""
        self.status_filter = ALL
        self.loading = False

    def load(self) -> list[Application]:
        if self.ctx.user is None or not self.ctx.connected:
            return self.displayed
        self.loading = True
        try:
            self.applications = self.ctx.repo.list_applications(user_id=self.ctx.user.id)
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load applications")
        finally:
            self.loading = False
        return self.displayed

    @property
    def filtered(self) -> list[Application]:
        term = self.search_term.strip().lower()
        return [
            a
            for a in self.applications
            if (not term or (a.service is not None and term in a.service.name.lower()))
            and status_matches(a, self.status_filter)
        ]

    @property
    def displayed(self) -> list[Application]:
        if self.applications:
            return self.filtered
        return placeholder_applications(self.ctx.user.id if self.ctx.user else "")


class ApplicationDetailView:
    """One application, visible to its owner only."""

    def __init__(self, ctx: AppContext, application_id: str):
        self.ctx = ctx
        self.application_id = application_id
        self.application: Application | None = None

    def load(self) -> Application | None:
        if self.ctx.user is None or not self.ctx.connected:
            return None
        try:
            app = self.ctx.repo.get_application(self.application_id, user_id=self.ctx.user.id)
            if app is None:
                raise NotFoundError("Application", self.application_id)
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load application details")
            return None
        self.application = app
        return app
