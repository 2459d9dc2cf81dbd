"""
Pipeline do painel: filtro -> consultas em paralelo -> agregação -> snapshot.

`DashboardService` é o pipeline sem estado usado pela API. `DashboardOrchestrator`
guarda o filtro corrente e o último snapshot para clientes de longa duração:
cada mudança de filtro roda um ciclo completo identificado por um id crescente,
e resultados de ciclos que não são mais o corrente são descartados.

A rota HTTP não usa o orquestrador: cada requisição já é um ciclo isolado.
Quem o embute é o processo que mantém uma sessão aberta com o usuário (a tela
do painel, um worker que empurra snapshots por websocket) e recebe dele as
mudanças de filtro e os eventos online/offline.
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import date
from typing import Callable, Optional

from painel.core.config import settings
from painel.core.errors import ConnectivityError
from painel.core.logging import cycle_context, dashboard_logger
from painel.domain.filters import DashboardFilters
from painel.domain.models import EMPTY_SNAPSHOT, DashboardSnapshot
from painel.services.aggregation import aggregate
from painel.services.fetchers import DashboardFetchers

Notifier = Callable[[str, str], None]


class DashboardService:
    """Service for dashboard aggregation."""

    def __init__(self, fetchers: DashboardFetchers):
        self.fetchers = fetchers

    async def build_snapshot(self, filters: DashboardFilters) -> DashboardSnapshot:
        """Valida o filtro, consulta as três fontes e agrega."""
        filters.validate()
        result = await self.fetchers.fetch_all(filters)
        snapshot = aggregate(
            result.analytic,
            result.marketing,
            result.operational,
            filters.period_start,
            filters.period_end,
        )
        dashboard_logger.info(
            "Snapshot agregado",
            store_id=filters.store_id,
            period_start=filters.period_start.isoformat(),
            period_end=filters.period_end.isoformat(),
            days=filters.days,
            analytic_rows=len(result.analytic),
            marketing_rows=len(result.marketing),
            operational_rows=len(result.operational),
        )
        return snapshot


def _log_notification(level: str, message: str) -> None:
    if level == "error":
        dashboard_logger.warning(message)
    else:
        dashboard_logger.info(message)


class DashboardOrchestrator:
    """Estado do painel para um cliente: filtro corrente, snapshot e último erro."""

    def __init__(
        self,
        service: DashboardService,
        filters: Optional[DashboardFilters] = None,
        *,
        reconnect_delay: Optional[float] = None,
        notify: Optional[Notifier] = None,
        today: Optional[date] = None,
    ):
        self.service = service
        self.filters = filters or DashboardFilters.create(today=today)
        self.snapshot: DashboardSnapshot = EMPTY_SNAPSHOT
        self.last_error: Optional[Exception] = None
        self.loading = False
        self.online = True
        self.reconnect_delay = (
            settings.RECONEXAO_INTERVALO if reconnect_delay is None else reconnect_delay
        )
        self._notify = notify or _log_notification
        self._ids = itertools.count(1)
        self._current_id = 0
        self._reconnect_task: Optional[asyncio.Task] = None
        self._today = today

    @property
    def current_request_id(self) -> int:
        return self._current_id

    async def set_filters(self, filters: DashboardFilters) -> Optional[DashboardSnapshot]:
        self.filters = filters
        return await self.refresh()

    async def update_filters(self, **changes) -> Optional[DashboardSnapshot]:
        """Aplica as mudanças (store_id, period_start, period_end) e recarrega tudo."""
        return await self.set_filters(self.filters.update(today=self._today, **changes))

    async def refresh(self, *, schedule_reconnect: bool = True) -> Optional[DashboardSnapshot]:
        """
        Roda um ciclo completo para o filtro corrente.

        Returns:
            O novo snapshot, ou None se um ciclo mais novo começou enquanto
            este estava em andamento (o resultado é descartado).

        Raises:
            O erro do ciclo corrente, depois de zerar o snapshot.
        """
        request_id = next(self._ids)
        self._current_id = request_id
        filters = self.filters
        # o snapshot anterior continua visível até o ciclo terminar
        self.loading = True

        try:
            if not self.online:
                raise ConnectivityError("Sem conexão com a internet")
            with cycle_context(request_id=request_id, store_id=filters.store_id):
                snapshot = await self.service.build_snapshot(filters)
        except Exception as exc:
            if request_id != self._current_id:
                dashboard_logger.info(
                    "Erro de ciclo antigo descartado",
                    request_id=request_id,
                    current_request_id=self._current_id,
                    error=str(exc),
                )
                return None
            self.loading = False
            self.snapshot = EMPTY_SNAPSHOT
            self.last_error = exc
            self._notify("error", f"Erro ao carregar dados: {exc}")
            if schedule_reconnect and isinstance(exc, ConnectivityError):
                self._schedule_reconnect()
            raise

        if request_id != self._current_id:
            dashboard_logger.info(
                "Resultado de ciclo antigo descartado",
                request_id=request_id,
                current_request_id=self._current_id,
            )
            return None

        self.loading = False
        self.snapshot = snapshot
        self.last_error = None
        dashboard_logger.debug("Ciclo do painel concluído", request_id=request_id)
        return snapshot

    def _schedule_reconnect(self) -> None:
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        dashboard_logger.info("Nova tentativa agendada", delay=self.reconnect_delay)
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect())

    async def _reconnect(self) -> None:
        await asyncio.sleep(self.reconnect_delay)
        try:
            await self.refresh(schedule_reconnect=False)
        except Exception as exc:
            # o erro já ficou registrado em last_error pelo refresh
            dashboard_logger.warning("Nova tentativa falhou", error=str(exc))

    async def on_online(self) -> Optional[DashboardSnapshot]:
        """Conexão restabelecida: recarrega tudo."""
        self.online = True
        self._notify("success", "Conexão restabelecida")
        return await self.refresh()

    def on_offline(self) -> None:
        self.online = False
        self._notify("error", "Sem conexão com a internet")

    async def close(self) -> None:
        if self._reconnect_task is not None and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
        self._reconnect_task = None
