"""Caller resolution and role checks shared by the portal routers.

Authentication itself happens upstream; requests arrive with the
authenticated user's id in ``X-User-Id``.
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.db.database import get_session
from src.db.models import User


async def get_current_user(
    x_user_id: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> User:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = await session.get(User, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_role(*roles: str) -> Callable[..., Awaitable[User]]:
    """Dependency factory: the caller must hold one of ``roles``."""

    async def _check(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if user.role not in roles:
            raise PermissionError(f"Role '{user.role}' may not access this resource")
        return user

    return _check


def client_ip(request: Request, trusted_proxies: list[str] | None = None) -> str | None:
    """Socket peer address, or the forwarded client when the peer is a trusted proxy.

    ``X-Forwarded-For`` is walked right to left and the first hop that is not
    itself a trusted proxy is taken; callers cannot inject addresses past it.
    """
    trusted = set(settings.trusted_proxies if trusted_proxies is None else trusted_proxies)
    peer = request.client.host if request.client else None
    if peer is None or peer not in trusted:
        return peer

    forwarded = request.headers.get("x-forwarded-for", "")
    for hop in reversed([h.strip() for h in forwarded.split(",") if h.strip()]):
        if hop not in trusted:
            return hop
    return peer
