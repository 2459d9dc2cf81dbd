"""Repositório de dados operacionais (equipe, erros e notas)."""

from typing import Any, Mapping

from painel.domain.models import OperationalRecord
from painel.repositories.base import PeriodRecordRepository, to_decimal, to_int


class OperacionalRepository(PeriodRecordRepository[OperationalRecord]):
    TABLE = "operacional"
    COLUMNS = {
        "id": "id",
        "store_id": "loja_id",
        "period_start": "data_inicio",
        "period_end": "data_fim",
        "attendants_day": "atendente_dia",
        "attendants_night": "atendente_noite",
        "kitchen_day": "cozinha_dia",
        "kitchen_night": "cozinha_noite",
        "managers": "gerente",
        "operational_errors": "erros_operacionais",
        "rating_ifood": "nota_ifood",
        "rating_google": "nota_google",
        "rating_consulting": "nota_consultoria",
    }

    def _from_row(self, row: Mapping[str, Any]) -> OperationalRecord:
        return OperationalRecord(
            id=row["id"],
            store_id=row["store_id"],
            period_start=row["period_start"],
            period_end=row["period_end"],
            attendants_day=to_int(row["attendants_day"]),
            attendants_night=to_int(row["attendants_night"]),
            kitchen_day=to_int(row["kitchen_day"]),
            kitchen_night=to_int(row["kitchen_night"]),
            managers=to_int(row["managers"]),
            operational_errors=to_int(row["operational_errors"]),
            rating_ifood=to_decimal(row["rating_ifood"]),
            rating_google=to_decimal(row["rating_google"]),
            rating_consulting=to_decimal(row["rating_consulting"]),
        )
