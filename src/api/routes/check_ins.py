"""Check-in endpoints. A new check-in rescores the agent."""

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import client_ip, get_current_user, require_role
from src.db.database import get_session
from src.db.models import User
from src.domains.fraud.config import FraudConfig
from src.domains.fraud.scorer import FraudScorer
from src.domains.portal import activity
from src.domains.portal.models import CheckInCreate, CheckInOut, Role
from src.shared.uploads import MediaStore

router = APIRouter(prefix="/api/check-ins", tags=["check-ins"])

_scorer = FraudScorer(config=FraudConfig.from_env())
_media = MediaStore()


@router.post("", status_code=201)
async def create_check_in(
    request: Request,
    latitude: float = Form(...),
    longitude: float = Form(...),
    address: str | None = Form(default=None),
    device_id: str | None = Form(default=None, alias="deviceId"),
    status: str = Form(default="verified"),
    selfie: UploadFile | None = File(default=None),  # noqa: B008
    video: UploadFile | None = File(default=None),  # noqa: B008
    user: User = Depends(require_role(Role.AGENT)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    selfie_url = None
    if selfie is not None:
        selfie_url = _media.store(await selfie.read(), "selfie", selfie.filename)
    video_url = None
    if video is not None:
        video_url = _media.store(await video.read(), "video", video.filename)

    payload = CheckInCreate(
        latitude=latitude,
        longitude=longitude,
        address=address,
        device_id=device_id,
        status=status,
        selfie_url=selfie_url,
        video_url=video_url,
    )
    check_in = await activity.create_check_in(session, user.id, payload, client_ip(request))
    await session.commit()
    body = CheckInOut.model_validate(check_in).to_wire()

    await _scorer.recompute_safely(session, user.id)
    return body


@router.get("")
async def list_check_ins(
    limit: int | None = Query(default=None, ge=1, le=500),
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    user_id = user.id if user.role == Role.AGENT else None
    rows = await activity.list_check_ins(session, user_id=user_id, limit=limit)
    return [CheckInOut.model_validate(row).to_wire() for row in rows]


@router.get("/latest")
async def latest_check_in(
    user: User = Depends(require_role(Role.AGENT)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict | None:
    check_in = await activity.latest_check_in(session, user.id)
    return CheckInOut.model_validate(check_in).to_wire() if check_in else None
