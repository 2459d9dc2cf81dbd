"""
Indicadores de ROI exibidos no painel.

São expressões simples sobre o snapshot, avaliadas na renderização.
Divisão por zero é evitada trocando o denominador zero por 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from painel.domain.models import DashboardSnapshot

_ONE = Decimal(1)


@dataclass(frozen=True)
class RoiSummary:
    investment: Decimal
    roi_current: Decimal
    roi_new_customers: Decimal
    roi_projected_annual: Decimal

    @property
    def roi_current_pct(self) -> Decimal:
        return self.roi_current * 100


def roi_current(snapshot: DashboardSnapshot) -> Decimal:
    return snapshot.revenue_total / (snapshot.marketing_investment or _ONE) - _ONE


def roi_new_customers(snapshot: DashboardSnapshot) -> Decimal:
    return snapshot.new_customers * snapshot.avg_ticket


def roi_projected_annual(snapshot: DashboardSnapshot) -> Decimal:
    return snapshot.marketing_investment + (snapshot.retention_rate / 100 * snapshot.revenue_total) * 12


def compute_roi(snapshot: DashboardSnapshot) -> RoiSummary:
    return RoiSummary(
        investment=snapshot.marketing_investment,
        roi_current=roi_current(snapshot),
        roi_new_customers=roi_new_customers(snapshot),
        roi_projected_annual=roi_projected_annual(snapshot),
    )
