"""Bank oversight endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import require_role
from src.db.database import get_session
from src.db.models import User
from src.domains.portal import profiles
from src.domains.portal.models import Role

router = APIRouter(prefix="/api/bank", tags=["bank"])


@router.get("/stats")
async def bank_stats(
    user: User = Depends(require_role(Role.BANK)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    by_risk = await profiles.count_profiles_by_risk(session)
    completed_audits = await profiles.count_audits(session, status="completed")
    return {
        "totalAgents": sum(by_risk.values()),
        "agentsByRisk": by_risk,
        "completedAudits": completed_audits,
    }
