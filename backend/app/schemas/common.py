from __future__ import annotations

from sqlmodel import SQLModel


class OkResponse(SQLModel):
    ok: bool = True


class ErrorResponse(SQLModel):
    error: str
