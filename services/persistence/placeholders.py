"""
Hard-coded rows shown when the database cannot be reached, so read views
stay navigable. Never written anywhere.
"""

from __future__ import annotations

from datetime import timedelta

from domain.models import Application, ApplicationStatus, Notification, Service, utcnow


def _ago(days: int):
    return utcnow() - timedelta(days=days)


def placeholder_services() -> list[Service]:
    return [
        Service(
            id="1",
            name="Birth Certificate",
            description="Apply for a birth certificate for newborns or get a duplicate copy.",
            documents_required=["ID Proof", "Hospital Certificate"],
            fee=100,
            processing_time="7-10 days",
        ),
        Service(
            id="2",
            name="Death Certificate",
            description="Register a death and obtain a death certificate.",
            documents_required=["ID Proof", "Medical Certificate"],
            fee=100,
            processing_time="7-10 days",
        ),
        Service(
            id="3",
            name="Property Tax",
            description="Pay your property tax online or get property tax assessment.",
            documents_required=["Property Documents", "Previous Tax Receipts"],
            fee=0,
            processing_time="Immediate",
        ),
        Service(
            id="4",
            name="Income Certificate",
            description="Apply for income certificate for various purposes.",
            documents_required=["ID Proof", "Income Proof", "Residence Proof"],
            fee=50,
            processing_time="15 days",
        ),
    ]


def placeholder_service(service_id: str) -> Service:
    return Service(
        id=service_id or "1",
        name="Service Details",
        description="This is a placeholder for service details when the database connection is unavailable.",
        documents_required=["ID Proof", "Address Proof"],
        fee=100,
        processing_time="7-10 days",
    )


def placeholder_applications(user_id: str = "") -> list[Application]:
    by_id = {s.id: s for s in placeholder_services()}
    return [
        Application(
            id="1",
            user_id=user_id,
            service_id="1",
            status=ApplicationStatus.PENDING,
            created_at=_ago(5),
            updated_at=_ago(5),
            service=by_id["1"],
        ),
        Application(
            id="2",
            user_id=user_id,
            service_id="3",
            status=ApplicationStatus.APPROVED,
            created_at=_ago(15),
            updated_at=_ago(10),
            service=by_id["3"],
        ),
    ]


def placeholder_notifications(user_id: str = "") -> list[Notification]:
    return [
        Notification(
            id="1",
            user_id=user_id,
            title="Application Submitted",
            message="Your application for Birth Certificate has been submitted successfully.",
            is_read=False,
            created_at=_ago(5),
        ),
        Notification(
            id="2",
            user_id=user_id,
            title="Application Approved",
            message="Your application for Property Tax has been approved.",
            is_read=True,
            created_at=_ago(10),
        ),
    ]
