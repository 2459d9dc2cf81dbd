"""FastAPI dependency providers for service layer."""

from painel.repositories.analista_repository import AnalistaRepository
from painel.repositories.marketing_repository import MarketingRepository
from painel.repositories.operacional_repository import OperacionalRepository
from painel.repositories.store_repository import StoreRepository
from painel.services.dashboard_service import DashboardService
from painel.services.fetchers import DashboardFetchers
from painel.services.records_service import RecordsService


def get_dashboard_service() -> DashboardService:
    return DashboardService(
        DashboardFetchers(AnalistaRepository(), MarketingRepository(), OperacionalRepository())
    )


def get_records_service() -> RecordsService:
    return RecordsService(
        StoreRepository(),
        AnalistaRepository(),
        MarketingRepository(),
        OperacionalRepository(),
    )
