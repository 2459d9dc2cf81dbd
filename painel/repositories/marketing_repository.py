"""Repositório de investimentos de marketing."""

from typing import Any, Mapping

from painel.domain.models import MarketingRecord
from painel.repositories.base import PeriodRecordRepository, to_decimal


class MarketingRepository(PeriodRecordRepository[MarketingRecord]):
    TABLE = "marketing"
    COLUMNS = {
        "id": "id",
        "store_id": "loja_id",
        "period_start": "data_inicio",
        "period_end": "data_fim",
        "investment": "investimento",
        "description": "descricao",
    }

    def _from_row(self, row: Mapping[str, Any]) -> MarketingRecord:
        return MarketingRecord(
            id=row["id"],
            store_id=row["store_id"],
            period_start=row["period_start"],
            period_end=row["period_end"],
            investment=to_decimal(row["investment"]),
            description=row.get("description") or "",
        )
