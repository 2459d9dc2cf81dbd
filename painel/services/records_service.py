"""Cadastro, consulta, edição e exclusão de lojas e registros por período."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from painel.core.errors import RecordNotFoundError, ValidationError
from painel.core.logging import app_logger
from painel.domain.filters import DashboardFilters
from painel.domain.models import AnalyticRecord, MarketingRecord, OperationalRecord, Store, as_date
from painel.repositories.protocols import (
    AnalistaRepositoryProtocol,
    MarketingRepositoryProtocol,
    OperacionalRepositoryProtocol,
    PeriodRecordRepositoryProtocol,
    StoreRepositoryProtocol,
)

PeriodRecord = AnalyticRecord | MarketingRecord | OperationalRecord


class RecordKind(str, Enum):
    ANALISTA = "analista"
    MARKETING = "marketing"
    OPERACIONAL = "operacional"


# campo -> (mínimo, máximo)
_RANGES: dict[str, tuple[Decimal, Decimal]] = {
    "rating_ifood": (Decimal(0), Decimal(5)),
    "rating_google": (Decimal(0), Decimal(5)),
    "rating_consulting": (Decimal(0), Decimal(100)),
}

_RANGE_MESSAGES = {
    "rating_ifood": "A nota do iFood deve estar entre 0 e 5",
    "rating_google": "A nota do Google deve estar entre 0 e 5",
    "rating_consulting": "A nota da consultoria deve estar entre 0 e 100%",
}


@dataclass(frozen=True)
class RecordEntry:
    """Linha da consulta de registros: tipo, registro e nome da loja."""

    kind: RecordKind
    record: PeriodRecord
    store_name: str = ""


def _check_period(period_start: Optional[date], period_end: Optional[date]) -> None:
    if period_start is None or period_end is None:
        raise ValidationError("Informe a data inicial e a data final")
    if as_date(period_end) < as_date(period_start):
        raise ValidationError("Data final não pode ser anterior à data inicial")


def _check_ranges(fields: Mapping[str, Any]) -> None:
    for name, (low, high) in _RANGES.items():
        if name in fields and fields[name] is not None:
            value = Decimal(str(fields[name]))
            if value < low or value > high:
                raise ValidationError(_RANGE_MESSAGES[name], {"campo": name, "valor": str(value)})


class RecordsService:
    """Service for store and per-period record maintenance."""

    def __init__(
        self,
        stores: StoreRepositoryProtocol,
        analista: AnalistaRepositoryProtocol,
        marketing: MarketingRepositoryProtocol,
        operacional: OperacionalRepositoryProtocol,
    ):
        self.stores = stores
        self._repos: dict[RecordKind, PeriodRecordRepositoryProtocol] = {
            RecordKind.ANALISTA: analista,
            RecordKind.MARKETING: marketing,
            RecordKind.OPERACIONAL: operacional,
        }

    def repository(self, kind: RecordKind) -> PeriodRecordRepositoryProtocol:
        return self._repos[RecordKind(kind)]

    # ------------------------------------------------------------------
    # Lojas
    # ------------------------------------------------------------------

    def list_stores(self, store_ids: Optional[list[int]] = None) -> list[Store]:
        return self.stores.get_all(store_ids or None)

    def create_store(
        self,
        name: str,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        manager_name: Optional[str] = None,
    ) -> Store:
        if not name or not name.strip():
            raise ValidationError("Informe o nome da loja")
        store = self.stores.insert(name.strip(), address, phone, manager_name)
        app_logger.info("Loja cadastrada", store_id=store.id)
        return store

    # ------------------------------------------------------------------
    # Registros por período
    # ------------------------------------------------------------------

    def create(self, kind: RecordKind, fields: Mapping[str, Any], user_id: Optional[str] = None) -> PeriodRecord:
        """Valida e grava um registro novo."""
        if not fields.get("store_id"):
            raise ValidationError("Selecione uma loja")
        _check_period(fields.get("period_start"), fields.get("period_end"))
        _check_ranges(fields)
        record = self.repository(kind).insert(fields, user_id=user_id)
        app_logger.info("Registro cadastrado", kind=RecordKind(kind).value, record_id=record.id)
        return record

    def update(self, kind: RecordKind, record_id: int, fields: Mapping[str, Any]) -> PeriodRecord:
        """Atualiza os campos informados, validando o registro resultante."""
        repo = self.repository(kind)
        current = repo.get(record_id)
        if current is None:
            raise RecordNotFoundError(f"Registro {record_id} não encontrado")
        if "store_id" in fields and not fields["store_id"]:
            raise ValidationError("Selecione uma loja")
        _check_period(
            fields.get("period_start", current.period_start),
            fields.get("period_end", current.period_end),
        )
        _check_ranges(fields)
        return repo.update(record_id, fields)

    def delete(self, kind: RecordKind, record_id: int) -> None:
        self.repository(kind).delete(record_id)
        app_logger.info("Registro excluído", kind=RecordKind(kind).value, record_id=record_id)

    def list_records(
        self,
        store_id: Optional[int] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        kind: Optional[RecordKind] = None,
    ) -> list[RecordEntry]:
        """
        Consulta registros das três fontes (ou só de `kind`).

        Sem datas informadas o intervalo fica aberto; a ordem é analista,
        marketing e operacional, cada fonte por data_inicio crescente.
        """
        filters = DashboardFilters(
            period_start=period_start or date.min,
            period_end=period_end or date.max,
            store_id=store_id,
        )
        names = {store.id: store.name for store in self.stores.get_all()}
        kinds = [RecordKind(kind)] if kind else list(RecordKind)

        entries: list[RecordEntry] = []
        for k in kinds:
            for record in self._repos[k].list_in_range(filters):
                entries.append(RecordEntry(kind=k, record=record, store_name=names.get(record.store_id, "")))
        return entries
