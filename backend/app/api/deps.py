"""Shared FastAPI dependencies for the API routers."""

from __future__ import annotations

from fastapi import Depends

from app.core.auth import get_auth_context
from app.db.session import get_session

SESSION_DEP = Depends(get_session)
AUTH_DEP = Depends(get_auth_context)
