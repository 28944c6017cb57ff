from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from domain.models import ApplicationStatus


class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    name: str


class ProfileIn(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class ServiceIn(BaseModel):
    name: str
    description: str
    documents_required: list[str] = []
    fee: float = 0
    processing_time: str


class ApplicationIn(BaseModel):
    service_id: str
    notes: str = ""
    # required document name -> uploaded file name
    documents: dict[str, str] = Field(default_factory=dict)


class TransitionIn(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None
