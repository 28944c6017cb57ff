from __future__ import annotations

import logging

from core.errors import PortalError, RemoteCallError
from domain.capabilities import Capability
from domain.models import Application, ApplicationStatus, Notification, StaffActivity
from domain.value_objects import StatusCounts
from services.persistence.placeholders import placeholder_applications, placeholder_notifications
from services.session import AppContext

logger = logging.getLogger(__name__)


class CitizenDashboard:
    """Most recent applications and notifications of the signed-in user."""

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.applications: list[Application] = []
        self.notifications: list[Notification] = []
        self.loading = False

    def load(self) -> None:
        user = self.ctx.user
        if user is None or not self.ctx.connected:
            return
        limit = self.ctx.settings.RECENT_LIMIT
        self.loading = True
        # each half degrades on its own
        try:
            self.applications = self.ctx.repo.list_applications(user_id=user.id, limit=limit)
        except PortalError as e:
            logger.error("error fetching applications: %s", e.message)
        try:
            self.notifications = self.ctx.repo.list_notifications(user.id, limit=limit)
        except PortalError as e:
            logger.error("error fetching notifications: %s", e.message)
        self.loading = False

    @property
    def displayed_applications(self) -> list[Application]:
        return self.applications or placeholder_applications(self.ctx.user.id if self.ctx.user else "")

    @property
    def displayed_notifications(self) -> list[Notification]:
        return self.notifications or placeholder_notifications(self.ctx.user.id if self.ctx.user else "")

    @property
    def unread(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    def mark_read(self, notification_id: str) -> bool:
        try:
            self.ctx.require_connected()
            user = self.ctx.require_user()
            self.ctx.repo.mark_notification_read(notification_id, user.id)
        except RemoteCallError as e:
            self.ctx.notices.fail(e, "Failed to update notification")
            return False
        except PortalError as e:
            self.ctx.notices.fail(e)
            return False
        for n in self.notifications:
            if n.id == notification_id:
                n.is_read = True
        return True


class AdminDashboard:
    """Staff activity (who processed what) and headline status counts."""

    HEADLINE = (ApplicationStatus.PENDING, ApplicationStatus.APPROVED, ApplicationStatus.REJECTED)

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.activities: list[StaffActivity] = []
        self.counts = StatusCounts()
        self.loading = False

    def load(self) -> None:
        try:
            self.ctx.require(Capability.VIEW_STAFF_ACTIVITY)
        except PortalError as e:
            self.ctx.notices.fail(e)
            return
        if not self.ctx.connected:
            return
        self.loading = True
        try:
            self.activities = self.ctx.repo.staff_activity()
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load staff activities")
        try:
            apps = self.ctx.repo.list_applications()
            self.counts = StatusCounts.tally(a.status for a in apps)
        except PortalError as e:
            self.ctx.notices.fail(e, "Failed to load application stats")
        self.loading = False

    @property
    def headline(self) -> dict[str, int]:
        return {s.value: self.counts[s] for s in self.HEADLINE}
