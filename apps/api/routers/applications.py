from fastapi import APIRouter, Depends, status

from apps.api.deps import ensure, get_context
from apps.api.schemas import ApplicationIn
from core.errors import ValidationError
from domain.models import ApplicationStatus
from services.session import AppContext
from services.views.applications import ALL, ApplicationDetailView, MyApplicationsView
from services.views.dashboards import CitizenDashboard
from services.views.submission import ApplicationFormView

router = APIRouter(tags=["applications"])


@router.post("/applications", status_code=status.HTTP_201_CREATED)
def create_application(payload: ApplicationIn, ctx: AppContext = Depends(get_context)):
    view = ApplicationFormView(ctx, payload.service_id)
    ensure(view.load(), ctx)
    for name, filename in payload.documents.items():
        try:
            view.attach(name, filename)
        except KeyError as e:
            raise ValidationError(f"'{name}' is not a required document of this service") from e
    view.notes = payload.notes
    return ensure(view.submit(), ctx)


@router.get("/applications")
def list_applications(
    q: str = "",
    status: ApplicationStatus | None = None,
    ctx: AppContext = Depends(get_context),
):
    view = MyApplicationsView(ctx)
    view.search_term = q
    view.status_filter = status.value if status else ALL
    view.load()
    ensure(ctx.notices.last_error is None, ctx)
    return {"applications": view.filtered}


@router.get("/applications/{application_id}")
def get_application(application_id: str, ctx: AppContext = Depends(get_context)):
    return ensure(ApplicationDetailView(ctx, application_id).load(), ctx)


@router.get("/dashboard")
def dashboard(ctx: AppContext = Depends(get_context)):
    view = CitizenDashboard(ctx)
    view.load()
    return {
        "applications": view.applications,
        "notifications": view.notifications,
        "unread": view.unread,
    }


@router.post("/notifications/{notification_id}/read")
def mark_notification_read(notification_id: str, ctx: AppContext = Depends(get_context)):
    ensure(CitizenDashboard(ctx).mark_read(notification_id), ctx)
    return {"id": notification_id, "is_read": True}


@router.get("/notifications")
def list_notifications(ctx: AppContext = Depends(get_context)):
    notifications = ctx.repo.list_notifications(ctx.user.id)
    return {"notifications": notifications, "unread": sum(1 for n in notifications if not n.is_read)}
