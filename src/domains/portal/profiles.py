"""Users, agent profiles and the score read surfaces built on them."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import AgentProfile, Audit, User
from src.domains.fraud.errors import NotFoundError, ProfileNotFoundError
from src.domains.fraud.models import RiskLevel

from .models import AgentScoreOut, UserUpdate

logger = structlog.get_logger()


async def get_user(session: AsyncSession, user_id: str) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User not found: {user_id}")
    return user


async def update_user(session: AsyncSession, user_id: str, update: UserUpdate) -> User:
    changes = update.model_dump(exclude_unset=True)
    if not changes:
        raise ValueError("Profile update must set at least one field")

    user = await get_user(session, user_id)
    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = datetime.now(UTC)
    await session.commit()
    logger.info("user_profile_updated", user_id=user_id, fields=sorted(changes))
    return user


async def list_users(session: AsyncSession, role: str | None = None) -> list[User]:
    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role)
    stmt = stmt.order_by(User.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_users_by_role(session: AsyncSession) -> dict[str, int]:
    stmt = select(User.role, func.count(User.id)).group_by(User.role)
    result = await session.execute(stmt)
    return {role: count for role, count in result.all()}


async def get_agent_profile(session: AsyncSession, user_id: str) -> AgentProfile:
    stmt = select(AgentProfile).where(AgentProfile.user_id == user_id)
    result = await session.execute(stmt)
    profile = result.scalar_one_or_none()
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


async def list_agent_profiles(
    session: AsyncSession,
    risk_level: RiskLevel | str | None = None,
) -> list[AgentProfile]:
    stmt = select(AgentProfile)
    if risk_level is not None:
        stmt = stmt.where(AgentProfile.risk_level == str(risk_level))
    stmt = stmt.order_by(AgentProfile.fraud_score.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_profiles_by_risk(session: AsyncSession) -> dict[str, int]:
    stmt = select(AgentProfile.risk_level, func.count(AgentProfile.id)).group_by(
        AgentProfile.risk_level
    )
    result = await session.execute(stmt)
    counts = {level.value: 0 for level in RiskLevel}
    counts.update({level: count for level, count in result.all()})
    return counts


async def _scored_agents(session: AsyncSession, stmt) -> list[AgentScoreOut]:
    result = await session.execute(stmt)
    rows = []
    for profile, user in result.all():
        name = " ".join(part for part in (user.first_name, user.last_name) if part) or None
        rows.append(
            AgentScoreOut(
                user_id=profile.user_id,
                csp_id=profile.csp_id,
                name=name,
                district=user.district,
                fraud_score=profile.fraud_score,
                risk_level=profile.risk_level,
                updated_at=profile.updated_at,
            )
        )
    return rows


async def high_risk_agents(session: AsyncSession, limit: int = 10) -> list[AgentScoreOut]:
    stmt = (
        select(AgentProfile, User)
        .join(User, User.id == AgentProfile.user_id)
        .where(AgentProfile.risk_level == RiskLevel.HIGH.value)
        .order_by(AgentProfile.fraud_score.desc())
        .limit(limit)
    )
    return await _scored_agents(session, stmt)


async def agent_scores(session: AsyncSession) -> list[AgentScoreOut]:
    stmt = (
        select(AgentProfile, User)
        .join(User, User.id == AgentProfile.user_id)
        .order_by(AgentProfile.fraud_score.desc(), AgentProfile.csp_id)
    )
    return await _scored_agents(session, stmt)


async def count_audits(session: AsyncSession, status: str | None = None) -> int:
    stmt = select(func.count(Audit.id))
    if status is not None:
        stmt = stmt.where(Audit.status == status)
    result = await session.execute(stmt)
    return result.scalar_one()
