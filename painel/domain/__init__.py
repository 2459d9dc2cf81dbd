"""
Modelos de domínio e DTOs para a aplicação.
Camada de domínio independente de infraestrutura.
"""

from .models import (
    EMPTY_SNAPSHOT,
    AnalyticRecord,
    DashboardSnapshot,
    MarketingRecord,
    OperationalRecord,
    Store,
)
from .filters import DashboardFilters, default_period
from .roi import RoiSummary, compute_roi

__all__ = [
    "EMPTY_SNAPSHOT",
    "AnalyticRecord",
    "DashboardSnapshot",
    "MarketingRecord",
    "OperationalRecord",
    "Store",
    "DashboardFilters",
    "default_period",
    "RoiSummary",
    "compute_roi",
]
