"""
Motor de agregação do painel.

Transforma as linhas das três fontes (analista, marketing, operacional) e o
período selecionado em um DashboardSnapshot. Função pura: sem I/O, sem estado,
mesma entrada produz a mesma saída.

Métricas de fluxo (faturamento, taxas, ticket) são somadas ou tiradas a média
sobre todas as linhas; contagens de clientes são métricas de snapshot e vêm da
última linha da sequência ordenada por data_inicio.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Sequence, TypeVar

from painel.domain.models import (
    EMPTY_SNAPSHOT,
    ZERO,
    AnalyticRecord,
    DailyRevenue,
    DashboardSnapshot,
    MarketingRecord,
    OperationalAverages,
    OperationalRecord,
    RepurchaseRates,
    as_date,
)

T = TypeVar("T")


def _sum(rows: Sequence[T], attr: Callable[[T], Decimal | int]) -> Decimal:
    return sum((Decimal(attr(row)) for row in rows), ZERO)


def _mean(rows: Sequence[T], attr: Callable[[T], Decimal | int]) -> Decimal:
    if not rows:
        return ZERO
    return _sum(rows, attr) / len(rows)


def daily_revenue_series(
    rows: Sequence[AnalyticRecord],
    period_start: date,
    period_end: date,
) -> tuple[DailyRevenue, ...]:
    """
    Um ponto por dia de period_start a period_end, inclusive.

    O valor do dia é o faturamento da primeira linha cujo data_inicio cai
    naquele dia; dias sem linha valem 0. Linhas com período invertido não
    preenchem dia nenhum. Intervalo invertido gera série vazia.
    """
    by_day: dict[date, Decimal] = {}
    for row in rows:
        if row.is_inverted:
            continue
        by_day.setdefault(as_date(row.period_start), row.revenue)

    start, end = as_date(period_start), as_date(period_end)
    days = (end - start).days + 1
    return tuple(
        DailyRevenue(day=day, value=by_day.get(day, ZERO))
        for day in (start + timedelta(days=offset) for offset in range(max(days, 0)))
    )


def operational_averages(rows: Sequence[OperationalRecord]) -> OperationalAverages:
    if not rows:
        return OperationalAverages()
    return OperationalAverages(
        attendants_day=_mean(rows, lambda r: r.attendants_day),
        attendants_night=_mean(rows, lambda r: r.attendants_night),
        kitchen_day=_mean(rows, lambda r: r.kitchen_day),
        kitchen_night=_mean(rows, lambda r: r.kitchen_night),
        managers=_mean(rows, lambda r: r.managers),
        operational_errors=_mean(rows, lambda r: r.operational_errors),
        rating_ifood=_mean(rows, lambda r: r.rating_ifood),
        rating_google=_mean(rows, lambda r: r.rating_google),
        rating_consulting=_mean(rows, lambda r: r.rating_consulting),
    )


def aggregate(
    analytic_rows: Sequence[AnalyticRecord] | None,
    marketing_rows: Sequence[MarketingRecord] | None,
    operational_rows: Sequence[OperationalRecord] | None,
    period_start: date,
    period_end: date,
) -> DashboardSnapshot:
    """
    Reduz as linhas das três fontes a um DashboardSnapshot.

    Args:
        analytic_rows: Registros do analista, ordenados por data_inicio crescente
        marketing_rows: Investimentos de marketing do período
        operational_rows: Registros operacionais do período
        period_start: Primeiro dia do intervalo selecionado
        period_end: Último dia do intervalo selecionado (inclusive)

    Returns:
        EMPTY_SNAPSHOT quando não há registros do analista; caso contrário o
        snapshot agregado.
    """
    analytic = list(analytic_rows or ())
    if not analytic:
        return EMPTY_SNAPSHOT

    marketing = list(marketing_rows or ())
    operational = list(operational_rows or ())

    latest = analytic[-1]
    recurring = latest.total_customers - latest.new_customers - latest.customers_to_enrich

    return DashboardSnapshot(
        revenue_total=_sum(analytic, lambda r: r.revenue),
        avg_ticket=_mean(analytic, lambda r: r.avg_ticket),
        total_customers=latest.total_customers,
        recurring_customers=recurring,
        new_customers=latest.new_customers,
        customers_to_enrich=latest.customers_to_enrich,
        retention_rate=_mean(analytic, lambda r: r.retention_rate),
        marketing_investment=_sum(marketing, lambda r: r.investment),
        repurchase_rates=RepurchaseRates(
            rate_1_2=_mean(analytic, lambda r: r.repurchase_rate_1_2),
            rate_2_3=_mean(analytic, lambda r: r.repurchase_rate_2_3),
            rate_3_4=_mean(analytic, lambda r: r.repurchase_rate_3_4),
            rate_4_5=_mean(analytic, lambda r: r.repurchase_rate_4_5),
        ),
        daily_revenue=daily_revenue_series(analytic, period_start, period_end),
        operational=operational_averages(operational),
    )
