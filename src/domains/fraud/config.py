"""Fraud scoring configuration with sensible defaults."""

import os
from dataclasses import dataclass, field


@dataclass
class OddHourWindow:
    start_hour: int = 23
    end_hour: int = 5
    timezone: str = "UTC"


@dataclass
class IdentityThresholds:
    max_distinct_devices: int = 2
    max_distinct_ips: int = 2


@dataclass(frozen=True)
class RiskThresholds:
    """Fixed classification boundaries. Not overridable from env or the rule registry."""

    medium_above: int = 25
    high_above: int = 50


@dataclass
class EvidenceWindow:
    """Bounds on the evidence loaded per recompute.

    ``None`` means unbounded: the whole history of the agent is scanned.
    """

    lookback_days: int | None = None
    max_records: int | None = None


@dataclass
class FraudConfig:
    odd_hours: OddHourWindow = field(default_factory=OddHourWindow)
    identity: IdentityThresholds = field(default_factory=IdentityThresholds)
    evidence: EvidenceWindow = field(default_factory=EvidenceWindow)

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        if v := os.getenv("FRAUD_LOCAL_TIMEZONE"):
            config.odd_hours.timezone = v
        if v := os.getenv("FRAUD_ODD_HOUR_START"):
            config.odd_hours.start_hour = int(v)
        if v := os.getenv("FRAUD_ODD_HOUR_END"):
            config.odd_hours.end_hour = int(v)

        if v := os.getenv("FRAUD_MAX_DISTINCT_DEVICES"):
            config.identity.max_distinct_devices = int(v)
        if v := os.getenv("FRAUD_MAX_DISTINCT_IPS"):
            config.identity.max_distinct_ips = int(v)

        if v := os.getenv("FRAUD_EVIDENCE_LOOKBACK_DAYS"):
            config.evidence.lookback_days = int(v)
        if v := os.getenv("FRAUD_EVIDENCE_MAX_RECORDS"):
            config.evidence.max_records = int(v)

        return config


RISK_THRESHOLDS = RiskThresholds()

# Module-level default instance
default_config = FraudConfig()
