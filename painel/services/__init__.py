"""
Serviços de domínio separados das rotas.

Inclui o motor de agregação do painel, as consultas às três fontes e o
cadastro de lojas e registros.
"""

from .aggregation import aggregate  # noqa: F401
from .dashboard_service import DashboardOrchestrator, DashboardService  # noqa: F401
from .fetchers import DashboardFetchers, fetch_with_retry  # noqa: F401
from .records_service import RecordKind, RecordsService  # noqa: F401

__all__ = [
    "aggregate",
    "DashboardFetchers",
    "DashboardOrchestrator",
    "DashboardService",
    "fetch_with_retry",
    "RecordKind",
    "RecordsService",
]
