from fastapi import APIRouter, Depends, Request, status

from apps.api.deps import ensure, get_context, get_public_context
from apps.api.schemas import ServiceIn
from services.session import AppContext
from services.views.catalog import CatalogView, ServiceForm

router = APIRouter(prefix="/services", tags=["services"])


def _form(payload: ServiceIn) -> ServiceForm:
    return ServiceForm(
        name=payload.name,
        description=payload.description,
        documents_required=", ".join(payload.documents_required),
        fee=payload.fee,
        processing_time=payload.processing_time,
    )


@router.get("/")
def list_services(q: str = "", ctx: AppContext = Depends(get_public_context)):
    view = CatalogView(ctx)
    view.load()
    return {
        "services": view.search(q),
        "placeholder": view.using_placeholders,
        "can_manage": view.can_manage,
    }


@router.get("/{service_id}")
def get_service(service_id: str, ctx: AppContext = Depends(get_public_context)):
    service = CatalogView(ctx).detail(service_id)
    ensure(ctx.notices.last_error is None, ctx)
    return service


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_service(payload: ServiceIn, ctx: AppContext = Depends(get_context)):
    view = CatalogView(ctx)
    ensure(view.create(_form(payload)), ctx)
    return {"services": view.services}


@router.put("/{service_id}")
def update_service(service_id: str, payload: ServiceIn, ctx: AppContext = Depends(get_context)):
    view = CatalogView(ctx)
    ensure(view.update(service_id, _form(payload)), ctx)
    return {"services": view.services}


@router.delete("/{service_id}")
def delete_service(
    request: Request,
    service_id: str,
    confirm: bool = False,
    ctx: AppContext = Depends(get_context),
):
    """The first call only arms the row; a later call with ``confirm=true`` deletes it."""
    armed = request.app.state.armed_deletes.setdefault(ctx.user.id, set())
    view = CatalogView(ctx, armed_deletes=armed)
    deleted = False
    if not view.is_armed(service_id):
        view.delete(service_id)
        ensure(view.is_armed(service_id), ctx)
    elif confirm:
        deleted = ensure(view.delete(service_id), ctx)
    return {"id": service_id, "deleted": deleted, "armed": view.is_armed(service_id)}
