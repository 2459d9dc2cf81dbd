"""
Montagem da aplicação FastAPI.

Cada etapa (middlewares, rotas, ciclo de vida, tratamento de erros) é um passo
do builder; `build()` recusa uma aplicação montada pela metade.
"""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from painel.core.config import settings
from painel.core.errors import ConnectivityError, PainelError
from painel.core.logging import api_logger, app_logger, cycle_context, init_app_logging
from painel.infra.db import health_check
from painel.routers import auth, dashboard, health, registros, stores

_DEV_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class ApplicationBuilder:
    """Builder for the FastAPI application."""

    def __init__(self):
        self.app = FastAPI(
            title=settings.APP_NAME,
            version="1.0.0",
            description="Métricas por loja: analista, marketing e operacional",
            docs_url="/docs",
            redoc_url="/redoc",
        )
        self._steps: set[str] = set()

    def _step(self, name: str) -> None:
        if name in self._steps:
            raise RuntimeError(f"{name} already added")
        self._steps.add(name)

    def add_middlewares(self) -> ApplicationBuilder:
        """CORS e log de requisições com X-Request-ID."""
        self._step("middlewares")

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS_LIST or _DEV_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def log_requests(request: Request, call_next):
            request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
            with cycle_context(http_request=request_id):
                response = await call_next(request)
                api_logger.info(
                    "Request handled",
                    method=request.method,
                    path=request.url.path,
                    status=response.status_code,
                )
            response.headers["X-Request-ID"] = request_id
            return response

        app_logger.info("Middlewares added", cors_origins=len(settings.CORS_ORIGINS_LIST or _DEV_ORIGINS))
        return self

    def add_routes(self) -> ApplicationBuilder:
        self._step("routes")
        for module in (health, auth, dashboard, stores, registros):
            self.app.include_router(module.router)
        app_logger.info("All routes added")
        return self

    def add_lifespan(self) -> ApplicationBuilder:
        """Valida o banco no startup sem impedir o boot."""
        self._step("lifespan")

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            app_logger.info("Starting application...", env=settings.ENV)
            try:
                info = health_check()
                app_logger.info("Database connection validated", database=info.get("database"))
            except PainelError as exc:
                # o painel zera e avisa a cada consulta enquanto o banco não responde
                app_logger.warning("Banco ainda não respondeu no startup", kind=type(exc).__name__, error=exc.message)
            yield
            app_logger.info("Shutting down application...")

        self.app.router.lifespan_context = lifespan
        return self

    def add_exception_handlers(self) -> ApplicationBuilder:
        """Converte PainelError em JSON com o status do tipo de erro."""
        self._step("exception_handlers")

        @self.app.exception_handler(PainelError)
        async def painel_error_handler(request: Request, exc: PainelError):
            api_logger.warning(
                "Request failed",
                path=request.url.path,
                kind=type(exc).__name__,
                error=exc.message,
            )
            content = {"detail": exc.message, "error": type(exc).__name__}
            if exc.details:
                content["info"] = exc.details
            headers = None
            if isinstance(exc, ConnectivityError):
                headers = {"Retry-After": str(int(settings.RECONEXAO_INTERVALO))}
            return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

        return self

    def build(self) -> FastAPI:
        missing = {"middlewares", "routes", "lifespan", "exception_handlers"} - self._steps
        if missing:
            raise RuntimeError(f"Application not fully configured: {sorted(missing)}")
        app_logger.info("FastAPI application built successfully")
        return self.app


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    init_app_logging()
    return (
        ApplicationBuilder()
        .add_middlewares()
        .add_routes()
        .add_lifespan()
        .add_exception_handlers()
        .build()
    )
