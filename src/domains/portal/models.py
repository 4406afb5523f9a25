"""Request and response schemas for the CSP portal surfaces."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field, field_validator

from src.shared.schemas import CamelModel


class Role(StrEnum):
    AGENT = "agent"
    ADMIN = "admin"
    AUDITOR = "auditor"
    BANK = "bank"


class TransactionCreate(CamelModel):
    transaction_type: str = Field(min_length=1)
    amount: float = Field(gt=0)
    customer_name: str = Field(min_length=1)
    customer_aadhaar: str = Field(min_length=1)
    account_number: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    device_id: str | None = None


class TransactionOut(CamelModel):
    id: int
    agent_id: str
    transaction_type: str
    amount: float
    customer_name: str
    customer_aadhaar: str | None = None
    account_number: str | None = None
    status: str
    latitude: float | None = None
    longitude: float | None = None
    device_id: str | None = None
    ip_address: str | None = None
    transaction_date: datetime


class CheckInCreate(CamelModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str | None = None
    device_id: str | None = None
    status: str = "verified"
    selfie_url: str | None = None
    video_url: str | None = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, v: str) -> str:
        if v not in ("verified", "failed", "pending"):
            raise ValueError("status must be one of verified, failed, pending")
        return v


class CheckInOut(CamelModel):
    id: int
    user_id: str
    selfie_url: str | None = None
    video_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    device_id: str | None = None
    ip_address: str | None = None
    match_score: int | None = None
    status: str
    check_in_date: datetime


class LocationLogCreate(CamelModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str | None = None
    device_id: str | None = None
    activity: str | None = None


class LocationLogOut(CamelModel):
    id: int
    user_id: str
    latitude: float
    longitude: float
    address: str | None = None
    device_id: str | None = None
    activity: str | None = None
    log_date: datetime


class AuditCreate(CamelModel):
    agent_id: str = Field(min_length=1)
    findings: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    status: str = "completed"
    priority: str = "normal"
    device_id: str | None = None
    assignment_id: int | None = None
    evidence_urls: list[str] = []

    @field_validator("status")
    @classmethod
    def _known_status(cls, v: str) -> str:
        if v not in ("pending", "completed", "failed"):
            raise ValueError("status must be one of pending, completed, failed")
        return v


class AuditOut(CamelModel):
    id: int
    audited_user_id: str
    auditor_id: str
    status: str
    findings: str | None = None
    evidence_urls: list[str] = []
    latitude: float | None = None
    longitude: float | None = None
    priority: str
    hash: str | None = None
    audit_date: datetime | None = None
    completed_date: datetime | None = None


class AssignmentCreate(CamelModel):
    auditor_id: str = Field(min_length=1)
    agent_id: str = Field(min_length=1)
    priority: str = "normal"
    reason: str | None = None
    due_date: datetime | None = None


class AssignmentOut(CamelModel):
    id: int
    auditor_id: str
    agent_id: str
    status: str
    priority: str
    reason: str | None = None
    due_date: datetime | None = None


class NotificationOut(CamelModel):
    id: int
    user_id: str
    title: str
    message: str
    type: str
    read: bool
    action_url: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None


class UserOut(CamelModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str
    username: str | None = None
    district: str | None = None
    state: str | None = None
    status: str | None = None


class UserUpdate(CamelModel):
    """Self-service profile fields; role and status are not editable here."""

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    district: str | None = None
    state: str | None = None


class AgentProfileOut(CamelModel):
    id: int
    user_id: str
    csp_id: str
    bank_account: str | None = None
    ifsc_code: str | None = None
    fraud_score: int
    risk_level: str
    updated_at: datetime | None = None


class AgentScoreOut(CamelModel):
    user_id: str
    csp_id: str
    name: str | None = None
    district: str | None = None
    fraud_score: int
    risk_level: str
    updated_at: datetime | None = None
