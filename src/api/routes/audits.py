"""Audit endpoints. Recording an audit rescores the audited agent."""

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import client_ip, require_role
from src.db.database import get_session
from src.db.models import User
from src.domains.fraud.config import FraudConfig
from src.domains.fraud.scorer import FraudScorer
from src.domains.portal import audits
from src.domains.portal.models import AssignmentOut, AuditCreate, AuditOut, Role
from src.shared.uploads import MediaStore

router = APIRouter(prefix="/api", tags=["audits"])

_scorer = FraudScorer(config=FraudConfig.from_env())
_media = MediaStore()

MAX_EVIDENCE_FILES = 5


@router.post("/audits", status_code=201)
async def create_audit(
    request: Request,
    agent_id: str = Form(..., alias="agentId"),
    findings: str | None = Form(default=None),
    latitude: float | None = Form(default=None),
    longitude: float | None = Form(default=None),
    status: str = Form(default="completed"),
    priority: str = Form(default="normal"),
    device_id: str | None = Form(default=None, alias="deviceId"),
    assignment_id: int | None = Form(default=None, alias="assignmentId"),
    evidence: list[UploadFile] | None = File(default=None),  # noqa: B008
    user: User = Depends(require_role(Role.AUDITOR)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    files = evidence or []
    if len(files) > MAX_EVIDENCE_FILES:
        raise ValueError(f"At most {MAX_EVIDENCE_FILES} evidence files per audit")
    evidence_urls = [_media.store(await f.read(), "evidence", f.filename) for f in files]

    payload = AuditCreate(
        agent_id=agent_id,
        findings=findings,
        latitude=latitude,
        longitude=longitude,
        status=status,
        priority=priority,
        device_id=device_id,
        assignment_id=assignment_id,
    )
    audit = await audits.create_audit(
        session, user.id, payload, evidence_urls=evidence_urls, ip_address=client_ip(request)
    )
    await session.commit()
    body = AuditOut.model_validate(audit).to_wire()

    await _scorer.recompute_safely(session, payload.agent_id)
    return body


@router.get("/audits")
async def list_audits(
    status: str | None = Query(default=None),
    user: User = Depends(require_role(Role.AUDITOR, Role.ADMIN, Role.BANK)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    auditor_id = user.id if user.role == Role.AUDITOR else None
    rows = await audits.list_audits(session, auditor_id=auditor_id, status=status)
    return [AuditOut.model_validate(row).to_wire() for row in rows]


@router.get("/auditor/assignments")
async def list_assignments(
    user: User = Depends(require_role(Role.AUDITOR)),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    rows = await audits.list_assignments(session, user.id)
    return [AssignmentOut.model_validate(row).to_wire() for row in rows]
