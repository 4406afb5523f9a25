"""Location log endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user
from src.db.database import get_session
from src.db.models import User
from src.domains.portal import activity
from src.domains.portal.models import LocationLogCreate, LocationLogOut, Role

router = APIRouter(prefix="/api/location-logs", tags=["location-logs"])


@router.get("")
async def list_location_logs(
    limit: int | None = Query(default=None, ge=1, le=500),
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    user_id = user.id if user.role == Role.AGENT else None
    rows = await activity.list_location_logs(session, user_id=user_id, limit=limit)
    return [LocationLogOut.model_validate(row).to_wire() for row in rows]


@router.post("", status_code=201)
async def create_location_log(
    payload: LocationLogCreate,
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    log = await activity.create_location_log(session, user.id, payload)
    await session.commit()
    return LocationLogOut.model_validate(log).to_wire()
