"""
Repositório de registros do analista (KPIs por período).
Tabela `dashboard` do schema original.
"""

from typing import Any, Mapping

from painel.domain.models import AnalyticRecord
from painel.repositories.base import PeriodRecordRepository, to_decimal, to_int


class AnalistaRepository(PeriodRecordRepository[AnalyticRecord]):
    TABLE = "dashboard"
    COLUMNS = {
        "id": "id",
        "store_id": "loja_id",
        "period_start": "data_inicio",
        "period_end": "data_fim",
        "revenue": "faturamento",
        "avg_ticket": "ticket_medio",
        "total_customers": "total_clientes",
        "customers_to_enrich": "clientes_enriquecer",
        "new_customers": "clientes_novos",
        "retention_rate": "taxa_retencao",
        "repurchase_rate_1_2": "taxa_recompra_1_2",
        "repurchase_rate_2_3": "taxa_recompra_2_3",
        "repurchase_rate_3_4": "taxa_recompra_3_4",
        "repurchase_rate_4_5": "taxa_recompra_4_5",
    }

    def _from_row(self, row: Mapping[str, Any]) -> AnalyticRecord:
        return AnalyticRecord(
            id=row["id"],
            store_id=row["store_id"],
            period_start=row["period_start"],
            period_end=row["period_end"],
            revenue=to_decimal(row["revenue"]),
            avg_ticket=to_decimal(row["avg_ticket"]),
            total_customers=to_int(row["total_customers"]),
            customers_to_enrich=to_int(row["customers_to_enrich"]),
            new_customers=to_int(row["new_customers"]),
            retention_rate=to_decimal(row["retention_rate"]),
            repurchase_rate_1_2=to_decimal(row["repurchase_rate_1_2"]),
            repurchase_rate_2_3=to_decimal(row["repurchase_rate_2_3"]),
            repurchase_rate_3_4=to_decimal(row["repurchase_rate_3_4"]),
            repurchase_rate_4_5=to_decimal(row["repurchase_rate_4_5"]),
        )
