"""Fraud rule registry: the weighted catalogue that parameterizes scoring."""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import FraudRule as FraudRuleDB

from .errors import NotFoundError
from .models import FraudRuleUpdate, FraudRuleView, RuleStatus

logger = structlog.get_logger()


@dataclass(frozen=True)
class DefaultRule:
    name: str
    description: str
    score_impact: int


DEFAULT_RULES: tuple[DefaultRule, ...] = (
    DefaultRule("odd-hour-transactions", "Transactions between 23:00 and 05:00", 15),
    DefaultRule("aadhaar-reuse", "Same Aadhaar used across multiple transactions", 25),
    DefaultRule("multiple-devices", "More than 2 distinct device identifiers seen", 10),
    DefaultRule("multiple-ips", "More than 2 distinct IP addresses seen", 10),
    DefaultRule("selfie-mismatch", "Check-in verification failed", 20),
    DefaultRule("missing-geolocation", "Transaction lacks latitude/longitude", 15),
    DefaultRule("failed-biometrics", "Failed biometric authentication", 30),
)


class RuleRegistry:
    """Reads and maintains the ``fraud_rules`` table.

    Rules are read fresh on every call, so admin edits apply from the next
    scoring run onward and there is no cache to invalidate.
    """

    def __init__(self, defaults: tuple[DefaultRule, ...] = DEFAULT_RULES) -> None:
        self._defaults = defaults

    @property
    def defaults(self) -> tuple[DefaultRule, ...]:
        return self._defaults

    async def initialize_default_rules(self, session: AsyncSession) -> list[str]:
        """Insert catalogue rules missing by name. Existing rows are left untouched."""
        result = await session.execute(select(FraudRuleDB.name))
        existing = set(result.scalars().all())

        inserted: list[str] = []
        now = datetime.now(UTC)
        for rule in self._defaults:
            if rule.name in existing:
                continue
            session.add(
                FraudRuleDB(
                    name=rule.name,
                    description=rule.description,
                    score_impact=rule.score_impact,
                    status=RuleStatus.ACTIVE.value,
                    created_at=now,
                    updated_at=now,
                )
            )
            existing.add(rule.name)
            inserted.append(rule.name)

        if inserted:
            await session.commit()

        logger.info("fraud_rules_seeded", inserted=inserted, existing=len(existing) - len(inserted))
        return inserted

    async def list_rules(self, session: AsyncSession) -> list[FraudRuleView]:
        result = await session.execute(select(FraudRuleDB).order_by(FraudRuleDB.name.asc()))
        return [FraudRuleView.model_validate(row) for row in result.scalars().all()]

    async def get_active_rules(self, session: AsyncSession) -> list[FraudRuleView]:
        stmt = (
            select(FraudRuleDB)
            .where(FraudRuleDB.status == RuleStatus.ACTIVE.value)
            .order_by(FraudRuleDB.name.asc())
        )
        result = await session.execute(stmt)
        return [FraudRuleView.model_validate(row) for row in result.scalars().all()]

    async def update_rule(
        self,
        session: AsyncSession,
        rule_ref: int | str,
        update: FraudRuleUpdate,
    ) -> FraudRuleView:
        """Change a rule's impact and/or status. Takes effect on the next scoring run."""
        if update.is_empty:
            raise ValueError("Rule update must set scoreImpact or status")

        row = await self._find(session, rule_ref)
        if row is None:
            raise NotFoundError(f"Fraud rule not found: {rule_ref}")

        if update.score_impact is not None:
            row.score_impact = update.score_impact
        if update.status is not None:
            row.status = update.status.value
        row.updated_at = datetime.now(UTC)
        await session.commit()

        logger.info(
            "fraud_rule_updated",
            rule_name=row.name,
            score_impact=row.score_impact,
            status=row.status,
        )
        return FraudRuleView.model_validate(row)

    async def _find(self, session: AsyncSession, rule_ref: int | str) -> FraudRuleDB | None:
        if isinstance(rule_ref, int) or (isinstance(rule_ref, str) and rule_ref.isdigit()):
            stmt = select(FraudRuleDB).where(FraudRuleDB.id == int(rule_ref))
        else:
            stmt = select(FraudRuleDB).where(FraudRuleDB.name == rule_ref)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
