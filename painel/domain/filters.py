"""
Estado de filtro do painel.
Centraliza a lógica de filtragem para que as três fontes usem as mesmas condições.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from painel.core.errors import ValidationError


def default_period(today: Optional[date] = None) -> tuple[date, date]:
    """Primeiro e último dia do mês corrente."""
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


_UNSET = object()


@dataclass(frozen=True)
class DashboardFilters:
    """
    Loja selecionada (opcional) e intervalo de datas inclusivo.

    Instâncias são imutáveis: qualquer alteração produz um novo filtro e,
    portanto, um novo ciclo completo de consulta e agregação.
    """

    period_start: date
    period_end: date
    store_id: Optional[int] = None
    # lojas visíveis à sessão quando nenhuma loja é selecionada; vazio = todas
    allowed_store_ids: tuple[int, ...] = ()

    @classmethod
    def create(
        cls,
        store_id: Optional[int] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        today: Optional[date] = None,
        allowed_store_ids: Sequence[int] = (),
    ) -> "DashboardFilters":
        """Datas ausentes voltam para o primeiro/último dia do mês corrente."""
        first, last = default_period(today)
        return cls(
            period_start=period_start or first,
            period_end=period_end or last,
            store_id=store_id or None,
            allowed_store_ids=tuple(allowed_store_ids),
        )

    def update(
        self,
        *,
        store_id=_UNSET,
        period_start=_UNSET,
        period_end=_UNSET,
        today: Optional[date] = None,
    ) -> "DashboardFilters":
        """
        Retorna um novo filtro com os campos informados.

        Uma data limpa (None) é redefinida para o padrão do mês corrente.
        """
        first, last = default_period(today)
        changes: dict = {}
        if store_id is not _UNSET:
            changes["store_id"] = store_id or None
        if period_start is not _UNSET:
            changes["period_start"] = period_start or first
        if period_end is not _UNSET:
            changes["period_end"] = period_end or last
        return replace(self, **changes)

    def validate(self) -> None:
        if self.period_end < self.period_start:
            raise ValidationError(
                "Data final não pode ser anterior à data inicial",
                {"data_inicial": self.period_start.isoformat(), "data_final": self.period_end.isoformat()},
            )

    @property
    def days(self) -> int:
        """Quantidade de dias do intervalo, incluindo as duas pontas."""
        return max((self.period_end - self.period_start).days + 1, 0)

    def to_sql_conditions(self, alias: str = "") -> tuple[list[str], dict]:
        """
        Converte os filtros em condições SQL e parâmetros.

        Registros são selecionados quando o período inteiro cabe no intervalo
        (data_inicio >= inicial e data_fim <= final).
        """
        prefix = f"{alias}." if alias else ""
        conditions = [
            f"{prefix}data_inicio >= :data_inicial",
            f"{prefix}data_fim <= :data_final",
        ]
        params: dict = {
            "data_inicial": self.period_start,
            "data_final": self.period_end,
        }

        if self.store_id:
            conditions.append(f"{prefix}loja_id = :loja_id")
            params["loja_id"] = self.store_id
        elif self.allowed_store_ids:
            conditions.append(f"{prefix}loja_id = ANY(:loja_ids)")
            params["loja_ids"] = list(self.allowed_store_ids)

        return conditions, params
