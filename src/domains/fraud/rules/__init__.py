"""Fraud rule predicates package.

Exports ALL_RULES (one instance per catalogued rule name) and RULES_BY_NAME
for lookup by the registry name stored in ``fraud_rules.name``.
"""

from .activity import MissingGeolocationRule, OddHourTransactionsRule, is_odd_hour, local_hour
from .base import EvidenceRule, ReservedRule
from .identity import AadhaarReuseRule, MultipleDevicesRule, MultipleIpsRule
from .verification import FailedBiometricsRule, SelfieMismatchRule

# All rule instances in evaluation order
ALL_RULES: list[EvidenceRule] = [
    OddHourTransactionsRule(),
    AadhaarReuseRule(),
    MultipleDevicesRule(),
    MultipleIpsRule(),
    SelfieMismatchRule(),
    MissingGeolocationRule(),
    FailedBiometricsRule(),
]

RULES_BY_NAME: dict[str, EvidenceRule] = {rule.rule_id: rule for rule in ALL_RULES}

__all__ = [
    "ALL_RULES",
    "RULES_BY_NAME",
    "EvidenceRule",
    "ReservedRule",
    "is_odd_hour",
    "local_hour",
    # Activity
    "OddHourTransactionsRule",
    "MissingGeolocationRule",
    # Identity
    "MultipleDevicesRule",
    "MultipleIpsRule",
    "AadhaarReuseRule",
    # Verification
    "SelfieMismatchRule",
    "FailedBiometricsRule",
]
