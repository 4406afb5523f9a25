"""Unit tests for the fraud scoring pipeline."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domains.fraud.errors import NotFoundError, ProfileNotFoundError
from src.domains.fraud.models import RiskLevel
from src.domains.fraud.rules_engine import RulesEngine
from src.domains.fraud.scorer import FraudScorer
from tests.conftest import (
    LATE_NIGHT,
    default_rule_views,
    make_check_in,
    make_evidence,
    make_transaction,
)


@pytest.fixture
def mock_session():
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


def _scorer(evidence, rules=None, updater=None):
    registry = MagicMock()
    registry.get_active_rules = AsyncMock(return_value=rules or default_rule_views())
    aggregator = MagicMock()
    aggregator.load_evidence = AsyncMock(return_value=evidence)
    updater = updater or MagicMock(apply_score=AsyncMock())
    return FraudScorer(
        registry=registry, aggregator=aggregator, engine=RulesEngine(), updater=updater
    )


class TestRecomputeFraudScore:
    @pytest.mark.asyncio
    async def test_full_pipeline(self, mock_session):
        evidence = make_evidence(
            transactions=[
                make_transaction(latitude=None),
                make_transaction(latitude=None),
                make_transaction(when=LATE_NIGHT),
            ],
            check_ins=[make_check_in("failed")],
        )
        scorer = _scorer(evidence)

        result = await scorer.recompute_fraud_score(mock_session, "agent-1")

        assert result.score == 65
        assert result.risk_level == RiskLevel.HIGH
        scorer._updater.apply_score.assert_awaited_once_with(
            mock_session, "agent-1", 65, RiskLevel.HIGH
        )
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_evidence_resets_to_low(self, mock_session):
        scorer = _scorer(make_evidence())
        result = await scorer.recompute_fraud_score(mock_session, "agent-1")
        assert result.score == 0
        assert result.risk_level == RiskLevel.LOW
        scorer._updater.apply_score.assert_awaited_once_with(
            mock_session, "agent-1", 0, RiskLevel.LOW
        )

    @pytest.mark.asyncio
    async def test_rules_fetched_every_run(self, mock_session):
        scorer = _scorer(make_evidence())
        await scorer.recompute_fraud_score(mock_session, "agent-1")
        await scorer.recompute_fraud_score(mock_session, "agent-1")
        assert scorer.registry.get_active_rules.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_profile_propagates(self, mock_session):
        updater = MagicMock(apply_score=AsyncMock(side_effect=ProfileNotFoundError("auditor-1")))
        scorer = _scorer(make_evidence(), updater=updater)
        with pytest.raises(ProfileNotFoundError):
            await scorer.recompute_fraud_score(mock_session, "auditor-1")
        mock_session.commit.assert_not_awaited()


class TestRecomputeSafely:
    @pytest.mark.asyncio
    async def test_returns_result_on_success(self, mock_session):
        scorer = _scorer(make_evidence())
        result = await scorer.recompute_safely(mock_session, "agent-1")
        assert result is not None
        assert result.score == 0

    @pytest.mark.asyncio
    async def test_missing_profile_is_swallowed(self, mock_session):
        updater = MagicMock(apply_score=AsyncMock(side_effect=ProfileNotFoundError("auditor-1")))
        scorer = _scorer(make_evidence(), updater=updater)
        assert await scorer.recompute_safely(mock_session, "auditor-1") is None
        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed(self, mock_session):
        scorer = _scorer(make_evidence())
        scorer._aggregator.load_evidence = AsyncMock(side_effect=ConnectionError("db down"))
        assert await scorer.recompute_safely(mock_session, "agent-1") is None
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_agent_is_swallowed(self, mock_session):
        scorer = _scorer(make_evidence())
        scorer._aggregator.load_evidence = AsyncMock(side_effect=NotFoundError("ghost"))
        assert await scorer.recompute_safely(mock_session, "ghost") is None
