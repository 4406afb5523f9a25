"""Fraud scoring pipeline: evidence -> rules -> classify -> persist."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .config import FraudConfig, default_config
from .errors import ProfileNotFoundError
from .evidence import EvidenceAggregator
from .models import ScoringResult
from .profile import ProfileUpdater
from .registry import RuleRegistry
from .rules_engine import RulesEngine

logger = structlog.get_logger()


class FraudScorer:
    """Orchestrates a full recompute of one agent's fraud score.

    Every run discards the previous score and derives a new one from the
    current evidence and the currently active rules.
    """

    def __init__(
        self,
        config: FraudConfig | None = None,
        registry: RuleRegistry | None = None,
        aggregator: EvidenceAggregator | None = None,
        engine: RulesEngine | None = None,
        updater: ProfileUpdater | None = None,
    ) -> None:
        self._config = config or default_config
        self._registry = registry or RuleRegistry()
        self._aggregator = aggregator or EvidenceAggregator(config=self._config)
        self._engine = engine or RulesEngine(config=self._config)
        self._updater = updater or ProfileUpdater()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    async def recompute_fraud_score(
        self,
        session: AsyncSession,
        agent_user_id: str,
    ) -> ScoringResult:
        """Run the full pipeline for an agent and commit the profile update."""
        # 1. Evidence for this agent
        evidence = await self._aggregator.load_evidence(session, agent_user_id)

        # 2. Rules as they stand right now
        active_rules = await self._registry.get_active_rules(session)

        # 3. Score and classify
        result = self._engine.evaluate(evidence, active_rules)

        # 4. Persist onto the agent profile
        await self._updater.apply_score(session, agent_user_id, result.score, result.risk_level)
        await session.commit()

        return result

    async def recompute_safely(
        self,
        session: AsyncSession,
        agent_user_id: str,
    ) -> ScoringResult | None:
        """Post-commit trigger hook. Never raises; the triggering write stands."""
        try:
            return await self.recompute_fraud_score(session, agent_user_id)
        except ProfileNotFoundError:
            await session.rollback()
            logger.warning("agent_profile_missing", agent_user_id=agent_user_id)
        except Exception:
            await session.rollback()
            logger.exception("fraud_score_recompute_failed", agent_user_id=agent_user_id)
        return None
