"""Caller profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user
from src.db.database import get_session
from src.db.models import User
from src.domains.fraud.errors import ProfileNotFoundError
from src.domains.portal import profiles
from src.domains.portal.models import AgentProfileOut, Role, UserOut, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile")
async def get_profile(
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    body = UserOut.model_validate(user).to_wire()
    if user.role == Role.AGENT:
        try:
            profile = await profiles.get_agent_profile(session, user.id)
        except ProfileNotFoundError:
            body["agentProfile"] = None
        else:
            body["agentProfile"] = AgentProfileOut.model_validate(profile).to_wire()
    return body


@router.patch("/profile")
async def update_profile(
    update: UserUpdate,
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    updated = await profiles.update_user(session, user.id, update)
    return UserOut.model_validate(updated).to_wire()
