"""Agent activity: transactions, check-ins and location logs."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import CheckIn, LocationLog, Transaction

from .models import CheckInCreate, LocationLogCreate, TransactionCreate

logger = structlog.get_logger()

# Simulated face-match result recorded on every check-in.
DEFAULT_MATCH_SCORE = 98


def _track_location(
    session: AsyncSession,
    user_id: str,
    latitude: float | None,
    longitude: float | None,
    activity: str,
    device_id: str | None = None,
    address: str | None = None,
    when: datetime | None = None,
) -> LocationLog | None:
    if latitude is None or longitude is None:
        return None
    log = LocationLog(
        user_id=user_id,
        latitude=latitude,
        longitude=longitude,
        address=address,
        device_id=device_id,
        activity=activity,
        log_date=when or datetime.now(UTC),
    )
    session.add(log)
    return log


async def create_transaction(
    session: AsyncSession,
    agent_id: str,
    payload: TransactionCreate,
    ip_address: str | None = None,
) -> Transaction:
    """Stage a transaction (and its location log when coordinates are given).

    Flushes but does not commit.
    """
    now = datetime.now(UTC)
    txn = Transaction(
        agent_id=agent_id,
        transaction_type=payload.transaction_type,
        amount=payload.amount,
        customer_name=payload.customer_name,
        customer_aadhaar=payload.customer_aadhaar,
        account_number=payload.account_number,
        status="completed",
        latitude=payload.latitude,
        longitude=payload.longitude,
        device_id=payload.device_id,
        ip_address=ip_address,
        transaction_date=now,
    )
    session.add(txn)
    _track_location(
        session,
        agent_id,
        payload.latitude,
        payload.longitude,
        activity="transaction",
        device_id=payload.device_id,
        when=now,
    )
    await session.flush()

    logger.info(
        "transaction_recorded",
        agent_id=agent_id,
        transaction_id=txn.id,
        transaction_type=txn.transaction_type,
        has_location=payload.latitude is not None and payload.longitude is not None,
    )
    return txn


async def list_transactions(
    session: AsyncSession,
    agent_id: str | None = None,
    limit: int | None = None,
) -> list[Transaction]:
    stmt = select(Transaction)
    if agent_id is not None:
        stmt = stmt.where(Transaction.agent_id == agent_id)
    stmt = stmt.order_by(Transaction.transaction_date.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_check_in(
    session: AsyncSession,
    user_id: str,
    payload: CheckInCreate,
    ip_address: str | None = None,
) -> CheckIn:
    now = datetime.now(UTC)
    check_in = CheckIn(
        user_id=user_id,
        selfie_url=payload.selfie_url,
        video_url=payload.video_url,
        latitude=payload.latitude,
        longitude=payload.longitude,
        address=payload.address,
        device_id=payload.device_id,
        ip_address=ip_address,
        match_score=DEFAULT_MATCH_SCORE,
        status=payload.status,
        check_in_date=now,
    )
    session.add(check_in)
    _track_location(
        session,
        user_id,
        payload.latitude,
        payload.longitude,
        activity="check-in",
        device_id=payload.device_id,
        address=payload.address,
        when=now,
    )
    await session.flush()

    logger.info(
        "check_in_recorded",
        user_id=user_id,
        check_in_id=check_in.id,
        status=check_in.status,
    )
    return check_in


async def list_check_ins(
    session: AsyncSession,
    user_id: str | None = None,
    limit: int | None = None,
) -> list[CheckIn]:
    stmt = select(CheckIn)
    if user_id is not None:
        stmt = stmt.where(CheckIn.user_id == user_id)
    stmt = stmt.order_by(CheckIn.check_in_date.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def latest_check_in(session: AsyncSession, user_id: str) -> CheckIn | None:
    check_ins = await list_check_ins(session, user_id=user_id, limit=1)
    return check_ins[0] if check_ins else None


async def create_location_log(
    session: AsyncSession,
    user_id: str,
    payload: LocationLogCreate,
) -> LocationLog:
    log = _track_location(
        session,
        user_id,
        payload.latitude,
        payload.longitude,
        activity=payload.activity or "login",
        device_id=payload.device_id,
        address=payload.address,
    )
    await session.flush()
    return log


async def list_location_logs(
    session: AsyncSession,
    user_id: str | None = None,
    limit: int | None = None,
) -> list[LocationLog]:
    stmt = select(LocationLog)
    if user_id is not None:
        stmt = stmt.where(LocationLog.user_id == user_id)
    stmt = stmt.order_by(LocationLog.log_date.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())
