"""Rules over check-in and biometric verification outcomes."""

from ..config import FraudConfig
from ..models import CheckInStatus, Evidence
from .base import EvidenceRule, ReservedRule


class SelfieMismatchRule(EvidenceRule):
    rule_id = "selfie-mismatch"
    category = "verification"

    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        return sum(1 for ci in evidence.check_ins if ci.status == CheckInStatus.FAILED)

    def describe(self, matches: int) -> str:
        return f"{matches} failed check-in verification(s)"


class FailedBiometricsRule(ReservedRule):
    """No biometric outcome is captured in the evidence, so this never fires."""

    rule_id = "failed-biometrics"
    category = "verification"
