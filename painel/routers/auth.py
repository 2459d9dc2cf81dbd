"""Sessão corrente. Os tokens são emitidos pelo provedor de identidade."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from painel.core.security import AccessClaims, get_current_session


router = APIRouter(prefix="/auth", tags=["auth"])


class SessionOut(BaseModel):
    id: str
    roles: list[str]
    stores: list[int]
    expires_at: int


@router.get("/me", response_model=SessionOut)
def me(claims: AccessClaims = Depends(get_current_session)) -> SessionOut:
    return SessionOut(
        id=claims.sub,
        roles=claims.roles,
        stores=claims.stores,
        expires_at=claims.exp,
    )
