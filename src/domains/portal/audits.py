"""Field audits of CSP agents and the auditor assignments that drive them."""

import hashlib
import json
from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import Audit, AuditorAssignment, User
from src.domains.fraud.errors import NotFoundError

from .models import AssignmentCreate, AuditCreate, Role
from .notifications import notify

logger = structlog.get_logger()


def audit_hash(
    audited_user_id: str,
    auditor_id: str,
    findings: str | None,
    evidence_urls: list[str],
    latitude: float | None,
    longitude: float | None,
    timestamp: datetime,
) -> str:
    """Tamper seal: sha256 over a canonical JSON of the audit record."""
    payload = {
        "auditedUserId": audited_user_id,
        "auditorId": auditor_id,
        "findings": findings,
        "evidenceUrls": evidence_urls,
        "latitude": latitude,
        "longitude": longitude,
        "timestamp": timestamp.isoformat(),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode()
    return hashlib.sha256(encoded).hexdigest()


async def _require_user(session: AsyncSession, user_id: str, role: Role) -> User:
    user = await session.get(User, user_id)
    if user is None or user.role != role:
        raise NotFoundError(f"No {role} with id {user_id}")
    return user


async def _first_admin(session: AsyncSession) -> User | None:
    stmt = select(User).where(User.role == Role.ADMIN).order_by(User.created_at).limit(1)
    result = await session.execute(stmt)
    return result.scalars().first()


async def create_audit(
    session: AsyncSession,
    auditor_id: str,
    payload: AuditCreate,
    evidence_urls: list[str] | None = None,
    ip_address: str | None = None,
) -> Audit:
    """Stage an audit of ``payload.agent_id``; the caller commits.

    Completes the referenced assignment, if any, and notifies the first admin.
    """
    await _require_user(session, payload.agent_id, Role.AGENT)

    now = datetime.now(UTC)
    urls = list(payload.evidence_urls) + list(evidence_urls or [])
    audit = Audit(
        audited_user_id=payload.agent_id,
        auditor_id=auditor_id,
        status=payload.status,
        findings=payload.findings,
        evidence_urls=urls,
        latitude=payload.latitude,
        longitude=payload.longitude,
        device_id=payload.device_id,
        ip_address=ip_address,
        priority=payload.priority,
        audit_date=now,
        completed_date=now if payload.status == "completed" else None,
        hash=audit_hash(
            payload.agent_id,
            auditor_id,
            payload.findings,
            urls,
            payload.latitude,
            payload.longitude,
            now,
        ),
    )
    session.add(audit)

    if payload.assignment_id is not None:
        await complete_assignment(session, payload.assignment_id, auditor_id)

    admin = await _first_admin(session)
    if admin is not None:
        notify(
            session,
            admin.id,
            title="Audit Completed",
            message=f"Audit for agent {payload.agent_id} recorded by auditor {auditor_id}",
            type="info",
            action_url="/admin/audit-logs",
        )

    await session.flush()
    logger.info(
        "audit_recorded",
        audit_id=audit.id,
        audited_user_id=payload.agent_id,
        auditor_id=auditor_id,
        status=audit.status,
        evidence_count=len(urls),
    )
    return audit


async def list_audits(
    session: AsyncSession,
    auditor_id: str | None = None,
    status: str | None = None,
) -> list[Audit]:
    stmt = select(Audit)
    if auditor_id is not None:
        stmt = stmt.where(Audit.auditor_id == auditor_id)
    if status is not None:
        stmt = stmt.where(Audit.status == status)
    stmt = stmt.order_by(Audit.audit_date.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_assignments(session: AsyncSession, auditor_id: str) -> list[AuditorAssignment]:
    stmt = (
        select(AuditorAssignment)
        .where(AuditorAssignment.auditor_id == auditor_id)
        .order_by(AuditorAssignment.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_assignment(session: AsyncSession, payload: AssignmentCreate) -> AuditorAssignment:
    await _require_user(session, payload.auditor_id, Role.AUDITOR)
    await _require_user(session, payload.agent_id, Role.AGENT)

    assignment = AuditorAssignment(
        auditor_id=payload.auditor_id,
        agent_id=payload.agent_id,
        status="assigned",
        priority=payload.priority,
        reason=payload.reason,
        due_date=payload.due_date,
    )
    session.add(assignment)
    notify(
        session,
        payload.auditor_id,
        title="New Audit Assignment",
        message=f"You have been assigned to audit agent {payload.agent_id}",
        type="alert",
        action_url="/auditor/assignments",
    )
    await session.flush()
    logger.info(
        "audit_assigned",
        assignment_id=assignment.id,
        auditor_id=payload.auditor_id,
        agent_id=payload.agent_id,
    )
    return assignment


async def complete_assignment(
    session: AsyncSession,
    assignment_id: int,
    auditor_id: str,
) -> AuditorAssignment:
    stmt = select(AuditorAssignment).where(
        AuditorAssignment.id == assignment_id,
        AuditorAssignment.auditor_id == auditor_id,
    )
    result = await session.execute(stmt)
    assignment = result.scalar_one_or_none()
    if assignment is None:
        raise NotFoundError(f"Assignment not found: {assignment_id}")
    assignment.status = "completed"
    assignment.updated_at = datetime.now(UTC)
    return assignment
