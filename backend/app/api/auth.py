from __future__ import annotations

from fastapi import APIRouter

from app.api.deps import AUTH_DEP
from app.core.auth import AuthContext
from app.core.errors import UnauthorizedError
from app.schemas.users import SessionRead, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/session", response_model=SessionRead)
def read_session(auth: AuthContext = AUTH_DEP) -> SessionRead:
    if auth.user is None:
        raise UnauthorizedError()
    return SessionRead(user=UserRead.model_validate(auth.user, from_attributes=True))
