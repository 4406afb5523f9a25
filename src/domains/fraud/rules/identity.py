"""Rules over the devices, networks and customer identities an agent uses."""

from ..config import FraudConfig
from ..models import Evidence
from .base import EvidenceRule, ReservedRule


class MultipleDevicesRule(EvidenceRule):
    """Flat penalty once more than the allowed number of devices is seen.

    A transaction without a device id counts as one more distinct value.
    """

    rule_id = "multiple-devices"
    category = "identity"
    flat = True

    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        distinct = {txn.device_id for txn in evidence.transactions}
        return int(len(distinct) > config.identity.max_distinct_devices)

    def describe(self, matches: int) -> str:
        return "Distinct device identifiers above the allowed limit"


class MultipleIpsRule(EvidenceRule):
    """Flat penalty once more than the allowed number of IP addresses is seen."""

    rule_id = "multiple-ips"
    category = "identity"
    flat = True

    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        distinct = {txn.ip_address for txn in evidence.transactions}
        return int(len(distinct) > config.identity.max_distinct_ips)

    def describe(self, matches: int) -> str:
        return "Distinct IP addresses above the allowed limit"


class AadhaarReuseRule(ReservedRule):
    # TODO: wire a predicate once the cross-agent Aadhaar reuse definition is agreed
    rule_id = "aadhaar-reuse"
    category = "identity"
