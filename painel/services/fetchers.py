"""
Busca das três fontes do painel.

As consultas são bloqueantes (SQLAlchemy); cada uma roda em uma thread via
asyncio.to_thread e as três são aguardadas juntas. A fonte do analista tem
retentativa com intervalo fixo; marketing e operacional tentam uma vez só.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from painel.core.config import settings
from painel.core.errors import ValidationError
from painel.core.logging import dashboard_logger
from painel.domain.filters import DashboardFilters
from painel.domain.models import AnalyticRecord, MarketingRecord, OperationalRecord
from painel.repositories.protocols import (
    AnalistaRepositoryProtocol,
    MarketingRepositoryProtocol,
    OperacionalRepositoryProtocol,
)

T = TypeVar("T")


async def fetch_with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    delay: float,
    source: str = "",
) -> T:
    """
    Executa `func` até `attempts` vezes, esperando `delay` segundos entre elas.

    Erros de validação não são repetidos. Esgotadas as tentativas, o último
    erro é propagado.
    """
    attempt = 1
    while True:
        try:
            return await func()
        except ValidationError:
            raise
        except Exception as exc:
            if attempt >= attempts:
                dashboard_logger.warning(
                    "Tentativas esgotadas",
                    source=source,
                    attempts=attempt,
                    error=str(exc),
                )
                raise
            dashboard_logger.info(
                "Falha na consulta, tentando novamente",
                source=source,
                attempt=attempt,
                retry_in=delay,
                error=str(exc),
            )
        attempt += 1
        await asyncio.sleep(delay)


@dataclass(frozen=True)
class FetchResult:
    analytic: list[AnalyticRecord]
    marketing: list[MarketingRecord]
    operational: list[OperationalRecord]


class DashboardFetchers:
    """Consulta as três fontes para um filtro."""

    def __init__(
        self,
        analista: AnalistaRepositoryProtocol,
        marketing: MarketingRepositoryProtocol,
        operacional: OperacionalRepositoryProtocol,
        *,
        analista_attempts: Optional[int] = None,
        analista_retry_delay: Optional[float] = None,
    ):
        self.analista = analista
        self.marketing = marketing
        self.operacional = operacional
        self.analista_attempts = (
            settings.ANALISTA_MAX_TENTATIVAS if analista_attempts is None else analista_attempts
        )
        self.analista_retry_delay = (
            settings.ANALISTA_INTERVALO_RETRY if analista_retry_delay is None else analista_retry_delay
        )

    async def fetch_analytic(self, filters: DashboardFilters) -> list[AnalyticRecord]:
        return await fetch_with_retry(
            lambda: asyncio.to_thread(self.analista.list_in_range, filters),
            attempts=self.analista_attempts,
            delay=self.analista_retry_delay,
            source="analista",
        )

    async def fetch_marketing(self, filters: DashboardFilters) -> list[MarketingRecord]:
        return await asyncio.to_thread(self.marketing.list_in_range, filters)

    async def fetch_operational(self, filters: DashboardFilters) -> list[OperationalRecord]:
        return await asyncio.to_thread(self.operacional.list_in_range, filters)

    async def fetch_all(self, filters: DashboardFilters) -> FetchResult:
        """
        Dispara as três consultas sem esperar uma pela outra e aguarda todas.

        Qualquer erro (após as retentativas do analista) invalida o ciclo
        inteiro: resultados parciais não são usados.
        """
        analytic, marketing, operational = await asyncio.gather(
            self.fetch_analytic(filters),
            self.fetch_marketing(filters),
            self.fetch_operational(filters),
            return_exceptions=True,
        )
        for result in (analytic, marketing, operational):
            if isinstance(result, BaseException):
                raise result
        return FetchResult(
            analytic=list(analytic or []),
            marketing=list(marketing or []),
            operational=list(operational or []),
        )
