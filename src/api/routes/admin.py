"""Admin endpoints: portal stats, agent scores and the fraud rule registry."""

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import require_role
from src.db.database import get_session
from src.db.models import User
from src.domains.fraud.config import FraudConfig
from src.domains.fraud.models import FraudRuleUpdate, FraudRuleView
from src.domains.fraud.scorer import FraudScorer
from src.domains.portal import audits, profiles
from src.domains.portal.models import AssignmentCreate, AssignmentOut, Role, UserOut

logger = structlog.get_logger()
router = APIRouter(prefix="/api/admin", tags=["admin"])

_scorer = FraudScorer(config=FraudConfig.from_env())

_admin = require_role(Role.ADMIN)


@router.get("/stats")
async def admin_stats(
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    users_by_role = await profiles.count_users_by_role(session)
    high_risk = await profiles.high_risk_agents(session, limit=10)
    pending_audits = await profiles.count_audits(session, status="pending")
    rules = await _scorer.registry.list_rules(session)

    return {
        "totalUsers": sum(users_by_role.values()),
        "usersByRole": users_by_role,
        "highRiskAgents": [agent.to_wire() for agent in high_risk],
        "pendingAudits": pending_audits,
        "fraudRules": [rule.to_wire() for rule in rules],
    }


@router.get("/agent-scores")
async def agent_scores(
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    rows = await profiles.agent_scores(session)
    return [row.to_wire() for row in rows]


@router.get("/users")
async def list_users(
    role: Role | None = Query(default=None),
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    rows = await profiles.list_users(session, role=role.value if role else None)
    return [UserOut.model_validate(row).to_wire() for row in rows]


@router.get("/fraud-rules")
async def list_fraud_rules(
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    rules: list[FraudRuleView] = await _scorer.registry.list_rules(session)
    return [rule.to_wire() for rule in rules]


@router.patch("/fraud-rules/{rule_ref}")
async def update_fraud_rule(
    rule_ref: str,
    update: FraudRuleUpdate,
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    rule = await _scorer.registry.update_rule(session, rule_ref, update)
    logger.info("fraud_rule_changed_by_admin", rule=rule.name, admin_id=user.id)
    return rule.to_wire()


@router.post("/agents/{user_id}/recompute")
async def recompute_agent_score(
    user_id: str,
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    result = await _scorer.recompute_fraud_score(session, user_id)
    return result.to_wire()


@router.post("/assignments", status_code=201)
async def create_assignment(
    payload: AssignmentCreate,
    user: User = Depends(_admin),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    assignment = await audits.create_assignment(session, payload)
    await session.commit()
    return AssignmentOut.model_validate(assignment).to_wire()
