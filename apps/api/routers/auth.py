from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from apps.api.deps import ensure, get_context, get_public_context
from apps.api.schemas import ProfileIn, RegisterIn
from core.errors import AuthenticationError
from services.session import AppContext
from services.views.accounts import LoginView, ProfileForm, ProfileView, RegistrationView

router = APIRouter(tags=["auth"])


@router.post("/auth/token")
def login(
    form: OAuth2PasswordRequestForm = Depends(),  # noqa: B008 (FastAPI)
    ctx: AppContext = Depends(get_public_context),
):
    if not LoginView(ctx).submit(form.username, form.password):
        notice = ctx.notices.last_error
        if notice is not None and notice.error is not None and notice.error.code == "REMOTE_ERROR":
            raise AuthenticationError(notice.message)
        ensure(False, ctx)
    if not ctx.access_token:
        raise AuthenticationError("sign-in returned no session; confirm the email address first")
    return {"access_token": ctx.access_token, "token_type": "bearer"}


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, ctx: AppContext = Depends(get_public_context)):
    ensure(RegistrationView(ctx).submit(payload.email, payload.password, payload.name), ctx)
    return {"detail": ctx.notices.peek()[-1].message}


@router.get("/profile")
def read_profile(ctx: AppContext = Depends(get_context)):
    return ctx.user


@router.patch("/profile")
def update_profile(payload: ProfileIn, ctx: AppContext = Depends(get_context)):
    view = ProfileView(ctx)
    current = view.form
    form = ProfileForm(
        name=payload.name if payload.name is not None else current.name,
        phone=payload.phone if payload.phone is not None else current.phone,
        address=payload.address if payload.address is not None else current.address,
    )
    ensure(view.save(form), ctx)
    return ctx.user
