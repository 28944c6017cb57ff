from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    CITIZEN = "citizen"
    STAFF = "staff"
    ADMIN = "admin"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        """Human form used in notices and notifications, e.g. ``in review``."""
        return self.value.replace("_", " ")


class ConnectionState(str, Enum):
    CHECKING = "checking"
    CONNECTED = "connected"
    ERROR = "error"


class Lifecycle(str, Enum):
    INIT = "init"
    READY = "ready"
    ERROR = "error"
    DISPOSED = "disposed"


class Profile(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    role: Role = Role.CITIZEN
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Service(BaseModel):
    id: str
    name: str
    description: str = ""
    documents_required: List[str] = []
    fee: Optional[float] = None
    processing_time: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("documents_required", mode="before")
    @classmethod
    def _as_list(cls, v):
        # rows written by older clients hold a bare string or null
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class Application(BaseModel):
    id: str
    user_id: str
    service_id: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    notes: Optional[str] = None
    documents: List[str] = []
    processed_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # filled client-side from the services / profiles tables
    service: Optional[Service] = None
    applicant: Optional[Profile] = None

    @field_validator("documents", mode="before")
    @classmethod
    def _docs_list(cls, v):
        return [] if v is None else v


class Notification(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class StaffActivity(BaseModel):
    application_id: str
    status: ApplicationStatus
    created_at: datetime
    processed_by: str
    staff_name: str = "Unknown"
