"""Tests for the citizen application list, dashboards and account views."""

from conftest import CITIZEN_ID
from domain.models import ConnectionState, Role
from services.views.accounts import LoginView, ProfileForm, ProfileView, RegistrationView, StaffRegistrationView
from services.views.applications import ApplicationDetailView, MyApplicationsView
from services.views.dashboards import AdminDashboard, CitizenDashboard


class TestMyApplications:
    def test_own_applications(self, citizen_ctx):
        view = MyApplicationsView(citizen_ctx)
        assert [a.id for a in view.load()] == ["app-1", "app-2"]

    def test_search_and_status(self, citizen_ctx):
        view = MyApplicationsView(citizen_ctx)
        view.load()
        view.search_term = "birth"
        assert [a.id for a in view.filtered] == ["app-1"]
        view.search_term = ""
        view.status_filter = "approved"
        assert [a.id for a in view.filtered] == ["app-2"]

    def test_placeholders_when_empty(self, make_ctx, backend):
        backend.tables["applications"] = []
        view = MyApplicationsView(make_ctx(CITIZEN_ID))
        shown = view.load()
        assert view.applications == []
        assert [a.id for a in shown] == ["1", "2"]

    def test_load_failure(self, citizen_ctx, backend):
        backend.fail("select applications")
        MyApplicationsView(citizen_ctx).load()
        assert citizen_ctx.notices.last_error.message == "Failed to load applications"

    def test_detail_owner_only(self, citizen_ctx, staff_ctx):
        assert ApplicationDetailView(citizen_ctx, "app-1").load().service.name == "Birth Certificate"
        assert ApplicationDetailView(staff_ctx, "app-1").load() is None
        assert staff_ctx.notices.last_error.error.code == "NOT_FOUND"


class TestCitizenDashboard:
    def test_load(self, citizen_ctx, backend):
        dash = CitizenDashboard(citizen_ctx)
        dash.load()
        assert len(dash.applications) == 2
        assert dash.unread == 1

    def test_recent_limit(self, citizen_ctx, backend):
        citizen_ctx.settings.RECENT_LIMIT = 1
        dash = CitizenDashboard(citizen_ctx)
        dash.load()
        assert [a.id for a in dash.applications] == ["app-1"]

    def test_halves_fail_independently(self, citizen_ctx, backend):
        backend.fail("select notifications")
        dash = CitizenDashboard(citizen_ctx)
        dash.load()
        assert len(dash.applications) == 2
        assert dash.notifications == []
        assert len(dash.displayed_notifications) == 2

    def test_mark_read(self, citizen_ctx, backend):
        dash = CitizenDashboard(citizen_ctx)
        dash.load()
        assert dash.mark_read("n-1")
        assert dash.unread == 0
        assert backend.tables["notifications"][0]["is_read"] is True

    def test_mark_read_offline(self, citizen_ctx, backend):
        citizen_ctx.connection = ConnectionState.ERROR
        assert not CitizenDashboard(citizen_ctx).mark_read("n-1")
        assert backend.calls == []


class TestAdminDashboard:
    def test_activity_and_headline(self, admin_ctx):
        dash = AdminDashboard(admin_ctx)
        dash.load()
        assert [a.staff_name for a in dash.activities] == ["Ravi Kumar"]
        assert dash.headline == {"pending": 1, "approved": 1, "rejected": 0}

    def test_staff_refused(self, staff_ctx, backend):
        dash = AdminDashboard(staff_ctx)
        dash.load()
        assert dash.activities == []
        assert staff_ctx.notices.last_error.error.code == "NOT_AUTHORIZED"
        assert backend.calls == []


class TestAccounts:
    def test_login(self, make_ctx):
        ctx = make_ctx()
        view = LoginView(ctx)
        assert view.submit("ravi@example.com", "secret1")
        assert ctx.user.role is Role.STAFF
        assert not view.loading

    def test_public_registration_is_citizen(self, make_ctx, backend):
        assert RegistrationView(make_ctx()).submit("new@example.com", "secret1", "New")
        assert backend.last_sign_up["metadata"]["role"] == "citizen"

    def test_staff_registration_by_admin(self, admin_ctx, backend):
        view = StaffRegistrationView(admin_ctx)
        assert view.allowed
        assert view.submit("clerk@example.com", "secret1", "Clerk")
        assert backend.last_sign_up["metadata"] == {"name": "Clerk", "role": "staff"}

    def test_staff_registration_by_staff(self, staff_ctx, backend):
        view = StaffRegistrationView(staff_ctx)
        assert not view.allowed
        assert not view.submit("clerk@example.com", "secret1", "Clerk")
        assert staff_ctx.notices.last_error.message == "You must be an admin to access this page."
        assert backend.calls == []

    def test_profile_form(self, citizen_ctx):
        view = ProfileView(citizen_ctx)
        assert view.form == ProfileForm(name="Asha Patil", phone="", address="")
        assert view.save(ProfileForm(name="Asha", phone="1", address="Main road"))
        assert view.form.address == "Main road"
