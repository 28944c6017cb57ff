from fastapi import APIRouter, Depends, status

from apps.api.deps import ensure, get_context
from apps.api.schemas import RegisterIn, TransitionIn
from core.errors import NotFoundError
from domain.models import ApplicationStatus
from services.session import AppContext
from services.views.accounts import StaffRegistrationView
from services.views.applications import ALL
from services.views.dashboards import AdminDashboard
from services.views.review import ReviewBoard

router = APIRouter(tags=["review"])


@router.get("/review/applications")
def review_applications(
    q: str = "",
    status: ApplicationStatus | None = None,
    ctx: AppContext = Depends(get_context),
):
    board = ReviewBoard(ctx)
    board.load()
    ensure(ctx.notices.last_error is None, ctx)
    board.search_term = q
    board.status_filter = status.value if status else ALL
    return {"applications": board.filtered, "counts": board.counts.as_dict()}


@router.get("/review/applications/{application_id}/actions")
def review_actions(application_id: str, ctx: AppContext = Depends(get_context)):
    board = ReviewBoard(ctx)
    board.load()
    ensure(ctx.notices.last_error is None, ctx)
    app = board.select(application_id)
    if app is None:
        raise NotFoundError("Application", application_id)
    return {"id": application_id, "status": app.status, "actions": board.actions(app)}


@router.post("/review/applications/{application_id}/transition")
def transition(application_id: str, payload: TransitionIn, ctx: AppContext = Depends(get_context)):
    board = ReviewBoard(ctx)
    ensure(board.transition(application_id, payload.status, payload.notes), ctx)
    return {"id": application_id, "status": payload.status, "counts": board.counts.as_dict()}


@router.get("/admin/activity")
def admin_activity(ctx: AppContext = Depends(get_context)):
    view = AdminDashboard(ctx)
    view.load()
    ensure(ctx.notices.last_error is None, ctx)
    return {"activities": view.activities, "counts": view.headline}


@router.post("/admin/staff", status_code=status.HTTP_201_CREATED)
def register_staff(payload: RegisterIn, ctx: AppContext = Depends(get_context)):
    ensure(StaffRegistrationView(ctx).submit(payload.email, payload.password, payload.name), ctx)
    return {"email": payload.email, "role": "staff"}
