"""Login, registration, staff provisioning and the profile page."""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import PortalError
from domain.capabilities import Capability
from domain.models import Profile, Role
from services.session import AppContext


class LoginView:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.loading = False

    def submit(self, email: str, password: str) -> bool:
        self.loading = True
        try:
            return self.ctx.sign_in(email, password)
        finally:
            self.loading = False


class RegistrationView:
    """Public sign-up; always creates a citizen account."""

    role = Role.CITIZEN

    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.loading = False

    def submit(self, email: str, password: str, name: str) -> bool:
        self.loading = True
        try:
            return self.ctx.sign_up(email, password, name, self.role)
        finally:
            self.loading = False


class StaffRegistrationView(RegistrationView):
    """Admin-only: provisions a staff account."""

    role = Role.STAFF

    @property
    def allowed(self) -> bool:
        return self.ctx.can(Capability.REGISTER_STAFF)

    def submit(self, email: str, password: str, name: str) -> bool:
        try:
            self.ctx.require(Capability.REGISTER_STAFF)
        except PortalError as e:
            self.ctx.notices.fail(e, "You must be an admin to access this page.")
            return False
        return super().submit(email, password, name)


@dataclass
class ProfileForm:
    name: str = ""
    phone: str = ""
    address: str = ""

    @classmethod
    def from_profile(cls, profile: Profile | None) -> "ProfileForm":
        if profile is None:
            return cls()
        return cls(name=profile.name, phone=profile.phone or "", address=profile.address or "")


class ProfileView:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.form = ProfileForm.from_profile(ctx.user)
        self.loading = False

    def save(self, form: ProfileForm | None = None) -> bool:
        form = form or self.form
        self.loading = True
        try:
            ok = self.ctx.update_profile(name=form.name, phone=form.phone, address=form.address)
        finally:
            self.loading = False
        if ok:
            self.form = ProfileForm.from_profile(self.ctx.user)
        return ok
