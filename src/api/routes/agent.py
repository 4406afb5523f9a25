"""Agent dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import require_role
from src.db.database import get_session
from src.db.models import User
from src.domains.portal import activity, profiles
from src.domains.portal.models import (
    AgentProfileOut,
    CheckInOut,
    LocationLogOut,
    Role,
    TransactionOut,
)

router = APIRouter(prefix="/api/agent", tags=["agent"])


@router.get("/stats")
async def agent_stats(
    user: User = Depends(require_role(Role.AGENT)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    profile = await profiles.get_agent_profile(session, user.id)
    transactions = await activity.list_transactions(session, agent_id=user.id, limit=10)
    check_in = await activity.latest_check_in(session, user.id)
    locations = await activity.list_location_logs(session, user_id=user.id, limit=5)

    return {
        "profile": AgentProfileOut.model_validate(profile).to_wire(),
        "recentTransactions": [TransactionOut.model_validate(t).to_wire() for t in transactions],
        "latestCheckIn": CheckInOut.model_validate(check_in).to_wire() if check_in else None,
        "recentLocations": [LocationLogOut.model_validate(loc).to_wire() for loc in locations],
    }
