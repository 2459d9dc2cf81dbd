"""
Registros por período: analista (KPIs), marketing e operacional.

Os payloads usam os nomes de coluna do schema (loja_id, data_inicio, faturamento...)
como aliases dos campos de domínio.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from painel.core.security import AccessClaims, ensure_store_access, require_roles
from painel.services.dependencies import get_records_service
from painel.services.records_service import RecordEntry, RecordKind, RecordsService


router = APIRouter(prefix="/registros", tags=["registros"])

_READ_ROLES = ("viewer", "analyst", "manager", "admin")
_WRITE_ROLES = ("analyst", "manager", "admin")

Number = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# -----------------------------------------------------------------------------
# Request/Response Models
# -----------------------------------------------------------------------------


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    def domain_fields(self) -> dict:
        """Campos com nomes de domínio."""
        return self.model_dump()


class _Patch(_Model):
    def domain_fields(self) -> dict:
        """Apenas os campos informados."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class AnalistaIn(_Model):
    store_id: int = Field(alias="loja_id")
    period_start: date = Field(alias="data_inicio")
    period_end: date = Field(alias="data_fim")
    revenue: Number = Field(alias="faturamento")
    avg_ticket: Number = Field(alias="ticket_medio")
    total_customers: int = Field(alias="total_clientes", ge=0)
    customers_to_enrich: int = Field(alias="clientes_enriquecer", ge=0)
    new_customers: int = Field(alias="clientes_novos", ge=0)
    retention_rate: Number = Field(alias="taxa_retencao")
    repurchase_rate_1_2: Number = Field(alias="taxa_recompra_1_2")
    repurchase_rate_2_3: Number = Field(alias="taxa_recompra_2_3")
    repurchase_rate_3_4: Number = Field(alias="taxa_recompra_3_4")
    repurchase_rate_4_5: Number = Field(alias="taxa_recompra_4_5")


class AnalistaPatch(_Patch):
    store_id: Optional[int] = Field(None, alias="loja_id")
    period_start: Optional[date] = Field(None, alias="data_inicio")
    period_end: Optional[date] = Field(None, alias="data_fim")
    revenue: Optional[Number] = Field(None, alias="faturamento")
    avg_ticket: Optional[Number] = Field(None, alias="ticket_medio")
    total_customers: Optional[int] = Field(None, alias="total_clientes", ge=0)
    customers_to_enrich: Optional[int] = Field(None, alias="clientes_enriquecer", ge=0)
    new_customers: Optional[int] = Field(None, alias="clientes_novos", ge=0)
    retention_rate: Optional[Number] = Field(None, alias="taxa_retencao")
    repurchase_rate_1_2: Optional[Number] = Field(None, alias="taxa_recompra_1_2")
    repurchase_rate_2_3: Optional[Number] = Field(None, alias="taxa_recompra_2_3")
    repurchase_rate_3_4: Optional[Number] = Field(None, alias="taxa_recompra_3_4")
    repurchase_rate_4_5: Optional[Number] = Field(None, alias="taxa_recompra_4_5")


class AnalistaOut(AnalistaIn):
    id: int


class MarketingIn(_Model):
    store_id: int = Field(alias="loja_id")
    period_start: date = Field(alias="data_inicio")
    period_end: date = Field(alias="data_fim")
    investment: Number = Field(alias="investimento")
    description: str = Field("", alias="descricao")


class MarketingPatch(_Patch):
    store_id: Optional[int] = Field(None, alias="loja_id")
    period_start: Optional[date] = Field(None, alias="data_inicio")
    period_end: Optional[date] = Field(None, alias="data_fim")
    investment: Optional[Number] = Field(None, alias="investimento")
    description: Optional[str] = Field(None, alias="descricao")


class MarketingOut(MarketingIn):
    id: int


class OperacionalIn(_Model):
    store_id: int = Field(alias="loja_id")
    period_start: date = Field(alias="data_inicio")
    period_end: date = Field(alias="data_fim")
    attendants_day: int = Field(alias="atendente_dia", ge=0)
    attendants_night: int = Field(alias="atendente_noite", ge=0)
    kitchen_day: int = Field(alias="cozinha_dia", ge=0)
    kitchen_night: int = Field(alias="cozinha_noite", ge=0)
    managers: int = Field(alias="gerente", ge=0)
    operational_errors: int = Field(alias="erros_operacionais", ge=0)
    rating_ifood: Number = Field(alias="nota_ifood")
    rating_google: Number = Field(alias="nota_google")
    rating_consulting: Number = Field(alias="nota_consultoria")


class OperacionalPatch(_Patch):
    store_id: Optional[int] = Field(None, alias="loja_id")
    period_start: Optional[date] = Field(None, alias="data_inicio")
    period_end: Optional[date] = Field(None, alias="data_fim")
    attendants_day: Optional[int] = Field(None, alias="atendente_dia", ge=0)
    attendants_night: Optional[int] = Field(None, alias="atendente_noite", ge=0)
    kitchen_day: Optional[int] = Field(None, alias="cozinha_dia", ge=0)
    kitchen_night: Optional[int] = Field(None, alias="cozinha_noite", ge=0)
    managers: Optional[int] = Field(None, alias="gerente", ge=0)
    operational_errors: Optional[int] = Field(None, alias="erros_operacionais", ge=0)
    rating_ifood: Optional[Number] = Field(None, alias="nota_ifood")
    rating_google: Optional[Number] = Field(None, alias="nota_google")
    rating_consulting: Optional[Number] = Field(None, alias="nota_consultoria")


class OperacionalOut(OperacionalIn):
    id: int
    total_staff: int = Field(alias="total_funcionarios")
    average_rating: Number = Field(alias="media_avaliacoes")


_OUT_MODELS: dict[RecordKind, type[_Model]] = {
    RecordKind.ANALISTA: AnalistaOut,
    RecordKind.MARKETING: MarketingOut,
    RecordKind.OPERACIONAL: OperacionalOut,
}


class RegistroOut(BaseModel):
    tipo: RecordKind
    loja_nome: str
    registro: Union[AnalistaOut, MarketingOut, OperacionalOut]


def _out(kind: RecordKind, record) -> _Model:
    return _OUT_MODELS[kind].model_validate(record)


def _entry(entry: RecordEntry) -> RegistroOut:
    return RegistroOut(tipo=entry.kind, loja_nome=entry.store_name, registro=_out(entry.kind, entry.record))


def _ensure_record_access(user: AccessClaims, service: RecordsService, kind: RecordKind, record_id: int) -> None:
    """Restringe alterações a registros das lojas da sessão."""
    if not user.stores:
        return
    current = service.repository(kind).get(record_id)
    if current is not None:
        ensure_store_access(user, current.store_id)


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=list[RegistroOut])
def list_registros(
    loja_id: Optional[int] = Query(None, description="Filtrar por loja"),
    data_inicial: Optional[date] = Query(None, description="data_inicio >= data_inicial"),
    data_final: Optional[date] = Query(None, description="data_fim <= data_final"),
    tipo: Optional[RecordKind] = Query(None, description="analista | marketing | operacional"),
    user: AccessClaims = Depends(require_roles(*_READ_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    """Consulta registros das três fontes."""
    ensure_store_access(user, loja_id)
    entries = service.list_records(loja_id, data_inicial, data_final, tipo)
    if user.stores:
        entries = [e for e in entries if e.record.store_id in user.stores]
    return [_entry(e) for e in entries]


@router.post("/analista", response_model=AnalistaOut, status_code=status.HTTP_201_CREATED)
def create_analista(
    payload: AnalistaIn,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    ensure_store_access(user, payload.store_id)
    record = service.create(RecordKind.ANALISTA, payload.domain_fields(), user_id=user.sub)
    return _out(RecordKind.ANALISTA, record)


@router.post("/marketing", response_model=MarketingOut, status_code=status.HTTP_201_CREATED)
def create_marketing(
    payload: MarketingIn,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    ensure_store_access(user, payload.store_id)
    record = service.create(RecordKind.MARKETING, payload.domain_fields(), user_id=user.sub)
    return _out(RecordKind.MARKETING, record)


@router.post("/operacional", response_model=OperacionalOut, status_code=status.HTTP_201_CREATED)
def create_operacional(
    payload: OperacionalIn,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    ensure_store_access(user, payload.store_id)
    record = service.create(RecordKind.OPERACIONAL, payload.domain_fields(), user_id=user.sub)
    return _out(RecordKind.OPERACIONAL, record)


@router.put("/analista/{record_id}", response_model=AnalistaOut)
def update_analista(
    record_id: int,
    payload: AnalistaPatch,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    _ensure_record_access(user, service, RecordKind.ANALISTA, record_id)
    ensure_store_access(user, payload.store_id)
    return _out(RecordKind.ANALISTA, service.update(RecordKind.ANALISTA, record_id, payload.domain_fields()))


@router.put("/marketing/{record_id}", response_model=MarketingOut)
def update_marketing(
    record_id: int,
    payload: MarketingPatch,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    _ensure_record_access(user, service, RecordKind.MARKETING, record_id)
    ensure_store_access(user, payload.store_id)
    return _out(RecordKind.MARKETING, service.update(RecordKind.MARKETING, record_id, payload.domain_fields()))


@router.put("/operacional/{record_id}", response_model=OperacionalOut)
def update_operacional(
    record_id: int,
    payload: OperacionalPatch,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    _ensure_record_access(user, service, RecordKind.OPERACIONAL, record_id)
    ensure_store_access(user, payload.store_id)
    return _out(RecordKind.OPERACIONAL, service.update(RecordKind.OPERACIONAL, record_id, payload.domain_fields()))


@router.delete("/{tipo}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_registro(
    tipo: RecordKind,
    record_id: int,
    user: AccessClaims = Depends(require_roles(*_WRITE_ROLES)),
    service: RecordsService = Depends(get_records_service),
):
    _ensure_record_access(user, service, tipo, record_id)
    service.delete(tipo, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
