"""Stores domain endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from painel.core.security import AccessClaims, require_roles
from painel.domain.models import Store
from painel.services.dependencies import get_records_service
from painel.services.records_service import RecordsService


router = APIRouter(prefix="/stores", tags=["stores"])


# -----------------------------------------------------------------------------
# Request/Response Models
# -----------------------------------------------------------------------------


class StoreIn(BaseModel):
    """Cadastro de loja."""
    nome: str = Field(..., min_length=1)
    endereco: Optional[str] = None
    telefone: Optional[str] = None
    responsavel: Optional[str] = None


class StoreRow(BaseModel):
    """Store list response model."""
    id: int
    nome: str
    endereco: Optional[str] = None
    telefone: Optional[str] = None
    responsavel: Optional[str] = None


def _row(store: Store) -> StoreRow:
    return StoreRow(
        id=store.id,
        nome=store.name,
        endereco=store.address,
        telefone=store.phone,
        responsavel=store.manager_name,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=list[StoreRow])
def get_stores(
    user: AccessClaims = Depends(require_roles("viewer", "analyst", "manager", "admin")),
    service: RecordsService = Depends(get_records_service),
):
    """Lista as lojas acessíveis ao usuário, por nome."""
    return [_row(s) for s in service.list_stores(user.stores or None)]


@router.post("", response_model=StoreRow, status_code=status.HTTP_201_CREATED)
def create_store(
    payload: StoreIn,
    user: AccessClaims = Depends(require_roles("manager", "admin")),
    service: RecordsService = Depends(get_records_service),
):
    """Cadastra uma nova loja."""
    store = service.create_store(
        payload.nome,
        address=payload.endereco,
        phone=payload.telefone,
        manager_name=payload.responsavel,
    )
    return _row(store)
