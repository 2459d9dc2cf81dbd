from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Literal
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, Field, ValidationError
from painel.core.config import settings

# -----------------------------------------------------------------------------
# 1) Claims do token de sessão
# -----------------------------------------------------------------------------

TokenType = Literal["access"]

class AccessClaims(BaseModel):
    sub: str
    type: TokenType = "access"
    exp: int
    roles: List[str] = Field(default_factory=list)
    stores: List[int] = Field(default_factory=list)

# -----------------------------------------------------------------------------
# 2) Helpers internos para emitir e decodificar JWT
# -----------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=True)

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)

def _exp_in(minutes: int) -> int:
    return int((_utcnow() + timedelta(minutes=minutes)).timestamp())

def _decode(token: str, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sessão inválida ou expirada."
        )

# -----------------------------------------------------------------------------
# 3) Emissão e validação (o provedor de identidade usa a mesma chave)
# -----------------------------------------------------------------------------

def create_access_token(*, user_id: str, roles: List[str], stores: List[int]) -> str:
    claims = AccessClaims(
        sub=user_id,
        exp=_exp_in(settings.ACCESS_TOKEN_MINUTES),
        roles=roles,
        stores=stores,
    )
    return jwt.encode(claims.model_dump(), settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> AccessClaims:
    data = _decode(token, settings.JWT_SECRET)
    try:
        return AccessClaims(**data)
    except ValidationError:
        raise HTTPException(status_code=401, detail="Token de acesso inválido.")

# -----------------------------------------------------------------------------
# 4) Dependências do FastAPI para autenticação/autorização
# -----------------------------------------------------------------------------

def get_current_session(creds: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> AccessClaims:
    return decode_access_token(creds.credentials)

def require_roles(*allowed_roles: str):
    def _dep(claims: AccessClaims = Depends(get_current_session)) -> AccessClaims:
        roles = set(map(str.lower, claims.roles or []))
        allowed = set(map(str.lower, allowed_roles))
        if roles.isdisjoint(allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permissão negada."
            )
        return claims
    return _dep

def ensure_store_access(claims: AccessClaims, store_id: int | None) -> None:
    """Sessões com lista de lojas só enxergam essas lojas; lista vazia enxerga todas."""
    if store_id and claims.stores and store_id not in claims.stores:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado à loja")
