"""Repository protocol definitions used by domain services."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, TypeVar

from painel.domain.filters import DashboardFilters
from painel.domain.models import AnalyticRecord, MarketingRecord, OperationalRecord, Store

R = TypeVar("R")


class PeriodRecordRepositoryProtocol(Protocol[R]):
    """Contract shared by the three per-period record sources."""

    def list_in_range(self, filters: DashboardFilters) -> list[R]: ...

    def get(self, record_id: int) -> Optional[R]: ...

    def insert(self, fields: Mapping[str, Any], user_id: Optional[str] = None) -> R: ...

    def update(self, record_id: int, fields: Mapping[str, Any]) -> R: ...

    def delete(self, record_id: int) -> None: ...


AnalistaRepositoryProtocol = PeriodRecordRepositoryProtocol[AnalyticRecord]
MarketingRepositoryProtocol = PeriodRecordRepositoryProtocol[MarketingRecord]
OperacionalRepositoryProtocol = PeriodRecordRepositoryProtocol[OperationalRecord]


class StoreRepositoryProtocol(Protocol):
    """Contract for store data access."""

    def get_all(self, store_ids: Optional[Sequence[int]] = None) -> list[Store]: ...

    def insert(
        self,
        name: str,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        manager_name: Optional[str] = None,
    ) -> Store: ...
