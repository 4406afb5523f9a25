"""Transaction endpoints. Creating a transaction rescores the agent."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import client_ip, get_current_user, require_role
from src.db.database import get_session
from src.db.models import User
from src.domains.fraud.config import FraudConfig
from src.domains.fraud.scorer import FraudScorer
from src.domains.portal import activity
from src.domains.portal.models import Role, TransactionCreate, TransactionOut

router = APIRouter(prefix="/api/transactions", tags=["transactions"])

_scorer = FraudScorer(config=FraudConfig.from_env())


@router.post("", status_code=201)
async def create_transaction(
    payload: TransactionCreate,
    request: Request,
    user: User = Depends(require_role(Role.AGENT)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    txn = await activity.create_transaction(session, user.id, payload, client_ip(request))
    await session.commit()
    body = TransactionOut.model_validate(txn).to_wire()

    await _scorer.recompute_safely(session, user.id)
    return body


@router.get("")
async def list_transactions(
    limit: int | None = Query(default=None, ge=1, le=500),
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    agent_id = user.id if user.role == Role.AGENT else None
    rows = await activity.list_transactions(session, agent_id=agent_id, limit=limit)
    return [TransactionOut.model_validate(row).to_wire() for row in rows]
