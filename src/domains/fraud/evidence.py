"""Load an agent's transactions, check-ins and location logs for scoring."""

from datetime import UTC, datetime, timedelta

import structlog
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import CheckIn, LocationLog, Transaction, User

from .config import FraudConfig, default_config
from .errors import NotFoundError
from .models import CheckInEvidence, Evidence, LocationEvidence, TransactionEvidence

logger = structlog.get_logger()


class EvidenceAggregator:
    """Queries the store for everything attributable to one agent.

    Each list is ordered newest-first. By default the full history is
    loaded; ``FraudConfig.evidence`` can bound it by age and/or count.
    """

    def __init__(self, config: FraudConfig | None = None) -> None:
        self._config = config or default_config

    async def load_evidence(
        self,
        session: AsyncSession,
        agent_user_id: str,
        now: datetime | None = None,
    ) -> Evidence:
        user = await session.get(User, agent_user_id)
        if user is None:
            raise NotFoundError(f"User not found: {agent_user_id}")

        since = self._window_start(now)

        txn_stmt = select(Transaction).where(Transaction.agent_id == agent_user_id)
        txn_stmt = self._bounded(txn_stmt, Transaction.transaction_date, since)
        transactions = [
            TransactionEvidence.model_validate(row)
            for row in (await session.execute(txn_stmt)).scalars().all()
        ]

        ci_stmt = select(CheckIn).where(CheckIn.user_id == agent_user_id)
        ci_stmt = self._bounded(ci_stmt, CheckIn.check_in_date, since)
        check_ins = [
            CheckInEvidence.model_validate(row)
            for row in (await session.execute(ci_stmt)).scalars().all()
        ]

        log_stmt = select(LocationLog).where(LocationLog.user_id == agent_user_id)
        log_stmt = self._bounded(log_stmt, LocationLog.log_date, since)
        location_logs = [
            LocationEvidence.model_validate(row)
            for row in (await session.execute(log_stmt)).scalars().all()
        ]

        logger.debug(
            "evidence_loaded",
            agent_user_id=agent_user_id,
            transactions=len(transactions),
            check_ins=len(check_ins),
            location_logs=len(location_logs),
            since=since.isoformat() if since else None,
        )

        return Evidence(
            agent_user_id=agent_user_id,
            transactions=transactions,
            check_ins=check_ins,
            location_logs=location_logs,
        )

    def _window_start(self, now: datetime | None) -> datetime | None:
        days = self._config.evidence.lookback_days
        if days is None:
            return None
        return (now or datetime.now(UTC)) - timedelta(days=days)

    def _bounded(self, stmt: Select, date_column, since: datetime | None) -> Select:
        if since is not None:
            stmt = stmt.where(date_column >= since)
        stmt = stmt.order_by(date_column.desc())
        if self._config.evidence.max_records is not None:
            stmt = stmt.limit(self._config.evidence.max_records)
        return stmt
