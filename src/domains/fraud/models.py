"""Pydantic models for the fraud domain."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from src.shared.schemas import CamelModel


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RuleStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CheckInStatus(StrEnum):
    VERIFIED = "verified"
    FAILED = "failed"
    PENDING = "pending"


class TransactionEvidence(CamelModel):
    id: int | None = None
    transaction_date: datetime
    device_id: str | None = None
    ip_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    customer_aadhaar: str | None = None


class CheckInEvidence(CamelModel):
    id: int | None = None
    status: str = CheckInStatus.VERIFIED
    check_in_date: datetime


class LocationEvidence(CamelModel):
    id: int | None = None
    latitude: float
    longitude: float
    log_date: datetime


class Evidence(CamelModel):
    """Everything attributable to one agent, each list newest-first."""

    agent_user_id: str
    transactions: list[TransactionEvidence] = []
    check_ins: list[CheckInEvidence] = []
    location_logs: list[LocationEvidence] = []

    @property
    def is_empty(self) -> bool:
        return not (self.transactions or self.check_ins or self.location_logs)


class FraudRuleView(CamelModel):
    id: int | None = None
    name: str
    description: str | None = None
    score_impact: int = Field(gt=0)
    status: RuleStatus = RuleStatus.ACTIVE
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == RuleStatus.ACTIVE


class FraudRuleUpdate(CamelModel):
    score_impact: int | None = Field(default=None, gt=0)
    status: RuleStatus | None = None

    @property
    def is_empty(self) -> bool:
        return self.score_impact is None and self.status is None


class RuleResult(CamelModel):
    rule_name: str
    matches: int = 0
    score_impact: int = 0
    contribution: int = 0
    reserved: bool = False
    details: str = ""

    @property
    def triggered(self) -> bool:
        return self.contribution > 0


class ScoringResult(CamelModel):
    agent_user_id: str
    score: int = Field(ge=0)
    risk_level: RiskLevel
    rule_results: list[RuleResult] = []
    computed_at: datetime
