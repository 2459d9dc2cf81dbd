"""Dashboard endpoint: métricas agregadas por período e loja."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from painel.core.security import AccessClaims, ensure_store_access, require_roles
from painel.domain.filters import DashboardFilters
from painel.domain.models import DashboardSnapshot
from painel.domain.roi import compute_roi
from painel.services.dashboard_service import DashboardService
from painel.services.dependencies import get_dashboard_service


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class FiltersOut(BaseModel):
    loja_id: Optional[int] = None
    data_inicial: date
    data_final: date


class DailyRevenueOut(BaseModel):
    data: date
    label: str
    valor: float


class RepurchaseOut(BaseModel):
    nome: str
    taxa: float


class CustomerShareOut(BaseModel):
    nome: str
    valor: int
    percentual: float


class OperationalOut(BaseModel):
    atendente_dia: float
    atendente_noite: float
    cozinha_dia: float
    cozinha_noite: float
    gerente: float
    erros_operacionais: float
    nota_ifood: float
    nota_google: float
    nota_consultoria: float


class RoiOut(BaseModel):
    investimento: float
    roi_atual_pct: float
    roi_novos_clientes: float
    roi_projetado_anual: float


class DashboardOut(BaseModel):
    filtros: FiltersOut
    faturamento_total: float
    ticket_medio: float
    total_clientes: int
    clientes_recorrentes: int
    clientes_novos: int
    clientes_enriquecer: int
    taxa_retencao: float
    investimento_marketing: float
    taxas_recompra: list[RepurchaseOut]
    distribuicao_clientes: list[CustomerShareOut]
    evolucao_faturamento: list[DailyRevenueOut]
    dados_operacionais: OperationalOut
    roi: RoiOut


def to_response(filters: DashboardFilters, snapshot: DashboardSnapshot) -> DashboardOut:
    roi = compute_roi(snapshot)
    ops = snapshot.operational
    return DashboardOut(
        filtros=FiltersOut(
            loja_id=filters.store_id,
            data_inicial=filters.period_start,
            data_final=filters.period_end,
        ),
        faturamento_total=float(snapshot.revenue_total),
        ticket_medio=float(snapshot.avg_ticket),
        total_clientes=snapshot.total_customers,
        clientes_recorrentes=snapshot.recurring_customers,
        clientes_novos=snapshot.new_customers,
        clientes_enriquecer=snapshot.customers_to_enrich,
        taxa_retencao=float(snapshot.retention_rate),
        investimento_marketing=float(snapshot.marketing_investment),
        taxas_recompra=[
            RepurchaseOut(nome=name, taxa=float(rate))
            for name, rate in snapshot.repurchase_rates.as_series()
        ],
        distribuicao_clientes=[
            CustomerShareOut(nome=share.name, valor=share.value, percentual=float(share.percentage))
            for share in snapshot.customer_distribution
        ],
        evolucao_faturamento=[
            DailyRevenueOut(data=point.day, label=point.label, valor=float(point.value))
            for point in snapshot.daily_revenue
        ],
        dados_operacionais=OperationalOut(
            atendente_dia=float(ops.attendants_day),
            atendente_noite=float(ops.attendants_night),
            cozinha_dia=float(ops.kitchen_day),
            cozinha_noite=float(ops.kitchen_night),
            gerente=float(ops.managers),
            erros_operacionais=float(ops.operational_errors),
            nota_ifood=float(ops.rating_ifood),
            nota_google=float(ops.rating_google),
            nota_consultoria=float(ops.rating_consulting),
        ),
        roi=RoiOut(
            investimento=float(roi.investment),
            roi_atual_pct=float(roi.roi_current_pct),
            roi_novos_clientes=float(roi.roi_new_customers),
            roi_projetado_anual=float(roi.roi_projected_annual),
        ),
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=DashboardOut)
async def get_dashboard(
    loja_id: Optional[int] = Query(None, description="Filtrar por loja (vazio = todas as lojas da sessão)"),
    data_inicial: Optional[date] = Query(None, description="Data inicial (padrão: 1º dia do mês)"),
    data_final: Optional[date] = Query(None, description="Data final (padrão: último dia do mês)"),
    user: AccessClaims = Depends(require_roles("viewer", "analyst", "manager", "admin")),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Snapshot agregado do painel para o período e loja selecionados."""
    ensure_store_access(user, loja_id)
    filters = DashboardFilters.create(
        store_id=loja_id,
        period_start=data_inicial,
        period_end=data_final,
        allowed_store_ids=user.stores,
    )
    snapshot = await service.build_snapshot(filters)
    return to_response(filters, snapshot)
