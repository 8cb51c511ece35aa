"""Bearer-token identity resolution.

Tokens are HS256 JWTs whose `sub` claim is the user id. The user row is the
source of truth for role and active state; the token only proves identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, Header
from jose import JWTError, jwt

from app.core.config import settings
from app.core.errors import UnauthorizedError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.db import crud
from app.db.session import get_session
from app.models.users import ROLE_PLATFORM_ADMIN, User

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AuthContext:
    user_id: UUID
    role: str
    user: User | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_PLATFORM_ADMIN


def create_access_token(user_id: UUID, *, expires_in: timedelta | None = None) -> str:
    expire = utcnow() + (expires_in or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str):
        return None
    try:
        return UUID(subject)
    except ValueError:
        return None


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_auth_context_optional(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> AuthContext | None:
    token = _bearer_token(authorization)
    if token is None:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        logger.info("auth.token_rejected")
        return None
    user = await crud.get_by_id(session, User, user_id)
    if user is None or not user.is_active:
        logger.info("auth.user_rejected user_id=%s", user_id)
        return None
    return AuthContext(user_id=user.id, role=user.role, user=user)


async def get_auth_context(
    auth: AuthContext | None = Depends(get_auth_context_optional),
) -> AuthContext:
    if auth is None:
        raise UnauthorizedError()
    return auth
