"""Rules over the timing and geotagging of an agent's transactions."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from ..config import FraudConfig
from ..models import Evidence
from .base import EvidenceRule


def local_hour(moment: datetime, timezone: str) -> int:
    """Hour of day in ``timezone``. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(ZoneInfo(timezone)).hour


def is_odd_hour(hour: int, start_hour: int, end_hour: int) -> bool:
    if start_hour <= end_hour:
        return start_hour <= hour < end_hour
    # Window wraps past midnight, e.g. 23:00-05:00
    return hour >= start_hour or hour < end_hour


class OddHourTransactionsRule(EvidenceRule):
    """One match per transaction booked inside the odd-hour window."""

    rule_id = "odd-hour-transactions"
    category = "activity"

    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        window = config.odd_hours
        return sum(
            1
            for txn in evidence.transactions
            if is_odd_hour(
                local_hour(txn.transaction_date, window.timezone),
                window.start_hour,
                window.end_hour,
            )
        )

    def describe(self, matches: int) -> str:
        return f"{matches} transaction(s) inside the odd-hour window"


class MissingGeolocationRule(EvidenceRule):
    """One match per transaction without both coordinates."""

    rule_id = "missing-geolocation"
    category = "activity"

    def count_matches(self, evidence: Evidence, config: FraudConfig) -> int:
        return sum(
            1
            for txn in evidence.transactions
            if txn.latitude is None or txn.longitude is None
        )

    def describe(self, matches: int) -> str:
        return f"{matches} transaction(s) without latitude/longitude"
