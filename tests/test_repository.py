"""Tests for services/persistence/repository.py: typed reads, joins and cache invalidation."""

import pytest

from conftest import CITIZEN_ID, STAFF_ID, FakeBackend, FakeGateway
from core.errors import RemoteCallError
from domain.models import ApplicationStatus
from services.persistence.cache import QueryCache
from services.persistence.repository import PortalRepository


@pytest.fixture()
def repo(backend):
    return PortalRepository(FakeGateway(backend), QueryCache())


class TestReads:
    def test_services_ordered_by_name(self, repo):
        assert [s.name for s in repo.list_services()] == ["Birth Certificate", "Property Tax"]

    def test_string_documents_normalised(self, repo):
        assert repo.get_service("svc-tax").documents_required == ["Property Documents"]

    def test_missing_service(self, repo):
        assert repo.get_service("nope") is None

    def test_applications_newest_first_with_service(self, repo):
        apps = repo.list_applications(user_id=CITIZEN_ID)
        assert [a.id for a in apps] == ["app-1", "app-2"]
        assert apps[0].service.name == "Birth Certificate"
        assert apps[0].applicant is None

    def test_applications_with_applicant(self, repo):
        apps = repo.list_applications(with_applicant=True)
        assert {a.applicant.name for a in apps} == {"Asha Patil"}

    def test_limit(self, repo):
        assert len(repo.list_applications(user_id=CITIZEN_ID, limit=1)) == 1

    def test_get_application_scoped_to_owner(self, repo):
        assert repo.get_application("app-1", user_id=CITIZEN_ID) is not None
        assert repo.get_application("app-1", user_id="someone-else") is None

    def test_staff_activity(self, repo, backend):
        backend.tables["applications"].append(
            {"id": "app-3", "user_id": CITIZEN_ID, "service_id": "svc-birth", "status": "rejected",
             "processed_by": "u-gone", "created_at": "2024-01-05T00:00:00+00:00"}
        )
        activity = repo.staff_activity()
        assert [a.application_id for a in activity] == ["app-3", "app-2"]
        assert activity[0].staff_name == "Unknown"
        assert activity[1].staff_name == "Ravi Kumar"
        assert activity[1].processed_by == STAFF_ID


class TestCaching:
    def test_repeat_read_hits_cache(self, repo, backend):
        repo.list_services()
        repo.list_services()
        assert backend.calls.count("select services") == 1

    def test_write_invalidates_table(self, repo, backend):
        repo.list_services()
        repo.create_service({"name": "Water Connection", "description": "New tap", "documents_required": []})
        names = [s.name for s in repo.list_services()]
        assert "Water Connection" in names
        assert backend.calls.count("select services") == 2

    def test_write_keeps_other_tables(self, repo, backend):
        repo.list_notifications(CITIZEN_ID)
        repo.list_services()
        repo.delete_service("svc-tax")
        repo.list_notifications(CITIZEN_ID)
        assert backend.calls.count("select notifications") == 1

    def test_failed_read_not_cached(self, repo, backend):
        backend.fail("select services")
        with pytest.raises(Exception):
            repo.list_services()
        backend.failures.clear()
        assert len(repo.list_services()) == 2


class TestWrites:
    def test_create_application_is_pending(self, repo, backend):
        app = repo.create_application(CITIZEN_ID, "svc-birth", "", ["ID Proof"])
        assert app.status is ApplicationStatus.PENDING
        assert backend.tables["applications"][-1]["status"] == "pending"

    def test_set_status_records_processor(self, repo, backend):
        repo.list_applications()
        repo.set_application_status("app-1", ApplicationStatus.IN_REVIEW, "checking", STAFF_ID)
        row = next(r for r in backend.tables["applications"] if r["id"] == "app-1")
        assert row["status"] == "in_review"
        assert row["processed_by"] == STAFF_ID
        assert repo.get_application("app-1").status is ApplicationStatus.IN_REVIEW

    def test_mark_notification_read_scoped(self, repo, backend):
        repo.mark_notification_read("n-1", "someone-else")
        assert backend.tables["notifications"][0]["is_read"] is False
        repo.mark_notification_read("n-1", CITIZEN_ID)
        assert backend.tables["notifications"][0]["is_read"] is True


def test_empty_backend():
    repo = PortalRepository(FakeGateway(FakeBackend({"profiles": [], "services": [], "applications": [],
                                                    "notifications": []})))
    assert repo.list_services() == []
    assert repo.list_applications() == []
    assert repo.staff_activity() == []


class _NoRepresentationGateway(FakeGateway):
    """Insert that stores the row but echoes back only the values sent."""

    def insert(self, table, row):
        super().insert(table, row)
        return dict(row)


def test_application_insert_without_returned_row(backend):
    repo = PortalRepository(_NoRepresentationGateway(backend), QueryCache())
    with pytest.raises(RemoteCallError, match="no row returned"):
        repo.create_application(CITIZEN_ID, "svc-birth", "", ["ID Proof"])
