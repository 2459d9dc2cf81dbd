"""
Modelos de domínio e DTOs.
Representam os conceitos de negócio independentes da infraestrutura.

Todos os registros são snapshots imutáveis produzidos por uma consulta.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

ZERO = Decimal(0)


def as_date(value: date | datetime) -> date:
    """Trunca datetime para date; date passa direto."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class Store:
    """Loja física com métricas acompanhadas separadamente."""

    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    manager_name: Optional[str] = None


@dataclass(frozen=True)
class AnalyticRecord:
    """KPIs de um período de uma loja (cadastro do analista)."""

    id: int
    store_id: int
    period_start: date
    period_end: date
    revenue: Decimal
    avg_ticket: Decimal
    total_customers: int
    customers_to_enrich: int
    new_customers: int
    retention_rate: Decimal
    repurchase_rate_1_2: Decimal
    repurchase_rate_2_3: Decimal
    repurchase_rate_3_4: Decimal
    repurchase_rate_4_5: Decimal

    @property
    def is_inverted(self) -> bool:
        return as_date(self.period_start) > as_date(self.period_end)


@dataclass(frozen=True)
class MarketingRecord:
    """Investimento de marketing de um período de uma loja."""

    id: int
    store_id: int
    period_start: date
    period_end: date
    investment: Decimal
    description: str = ""


@dataclass(frozen=True)
class OperationalRecord:
    """Equipe, erros e notas de avaliação de um período de uma loja."""

    id: int
    store_id: int
    period_start: date
    period_end: date
    attendants_day: int
    attendants_night: int
    kitchen_day: int
    kitchen_night: int
    managers: int
    operational_errors: int
    rating_ifood: Decimal  # escala 0-5
    rating_google: Decimal  # escala 0-5
    rating_consulting: Decimal  # percentual 0-100

    @property
    def total_staff(self) -> int:
        return (
            self.attendants_day
            + self.attendants_night
            + self.kitchen_day
            + self.kitchen_night
            + self.managers
        )

    @property
    def average_rating(self) -> Decimal:
        """Média simples das três notas, como exibida na consulta de registros."""
        return (self.rating_ifood + self.rating_google + self.rating_consulting) / 3


@dataclass(frozen=True)
class RepurchaseRates:
    """Taxas médias de recompra por etapa (1ª→2ª ... 4ª→5ª)."""

    rate_1_2: Decimal = ZERO
    rate_2_3: Decimal = ZERO
    rate_3_4: Decimal = ZERO
    rate_4_5: Decimal = ZERO

    def as_series(self) -> list[tuple[str, Decimal]]:
        """Série ordenada para o gráfico de linhas de recompra."""
        return [
            ("1ª para 2ª", self.rate_1_2),
            ("2ª para 3ª", self.rate_2_3),
            ("3ª para 4ª", self.rate_3_4),
            ("4ª para 5ª", self.rate_4_5),
        ]


@dataclass(frozen=True)
class DailyRevenue:
    """Ponto diário da série de faturamento."""

    day: date
    value: Decimal

    @property
    def label(self) -> str:
        return self.day.strftime("%d/%m/%Y")


@dataclass(frozen=True)
class OperationalAverages:
    """Médias dos campos operacionais; zero quando não há registros."""

    attendants_day: Decimal = ZERO
    attendants_night: Decimal = ZERO
    kitchen_day: Decimal = ZERO
    kitchen_night: Decimal = ZERO
    managers: Decimal = ZERO
    operational_errors: Decimal = ZERO
    rating_ifood: Decimal = ZERO
    rating_google: Decimal = ZERO
    rating_consulting: Decimal = ZERO


@dataclass(frozen=True)
class CustomerShare:
    """Fatia do gráfico de distribuição de clientes."""

    name: str
    value: int
    percentage: Decimal


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    Visão agregada do painel para um filtro.
    Recalculada a cada mudança de filtro, nunca persistida.
    """

    revenue_total: Decimal = ZERO
    avg_ticket: Decimal = ZERO
    total_customers: int = 0
    recurring_customers: int = 0
    new_customers: int = 0
    customers_to_enrich: int = 0
    retention_rate: Decimal = ZERO
    marketing_investment: Decimal = ZERO
    repurchase_rates: RepurchaseRates = field(default_factory=RepurchaseRates)
    daily_revenue: tuple[DailyRevenue, ...] = ()
    operational: OperationalAverages = field(default_factory=OperationalAverages)

    @property
    def customer_distribution(self) -> list[CustomerShare]:
        """Novos, recorrentes (RFV) e para enriquecer sobre o total de clientes."""
        slices = [
            ("Novos", self.new_customers),
            ("RFV", self.recurring_customers),
            ("Para Enriquecer", self.customers_to_enrich),
        ]
        total = self.total_customers
        return [
            CustomerShare(
                name=name,
                value=value,
                percentage=(Decimal(value) * 100 / total) if total else ZERO,
            )
            for name, value in slices
        ]


EMPTY_SNAPSHOT = DashboardSnapshot()
