"""Persist a computed fraud score onto the agent's profile."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import AgentProfile

from .errors import ProfileNotFoundError
from .models import RiskLevel

logger = structlog.get_logger()


class ProfileUpdater:
    """Overwrites ``fraud_score``/``risk_level`` and stamps ``updated_at``.

    The write is last-writer-wins; concurrent recomputes for the same
    agent are not serialized. The caller owns the commit.
    """

    async def apply_score(
        self,
        session: AsyncSession,
        agent_user_id: str,
        score: int,
        risk_level: RiskLevel,
    ) -> AgentProfile:
        stmt = select(AgentProfile).where(AgentProfile.user_id == agent_user_id)
        result = await session.execute(stmt)
        profile = result.scalar_one_or_none()
        if profile is None:
            raise ProfileNotFoundError(agent_user_id)

        previous_level = profile.risk_level
        profile.fraud_score = score
        profile.risk_level = risk_level.value
        profile.updated_at = datetime.now(UTC)

        logger.info(
            "agent_profile_scored",
            agent_user_id=agent_user_id,
            csp_id=profile.csp_id,
            fraud_score=score,
            risk_level=risk_level.value,
            previous_risk_level=previous_level,
        )
        return profile
