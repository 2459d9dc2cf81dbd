"""
Hierarquia de erros do painel.

Conectividade e consulta vêm do banco; validação é detectada antes de qualquer
consulta. Os handlers do FastAPI convertem cada tipo em um status HTTP.
"""

from __future__ import annotations

from typing import Any, Optional


class PainelError(RuntimeError):
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConnectivityError(PainelError):
    """Sem caminho de rede até o banco. Gera uma nova tentativa adiada."""

    status_code = 503


class QueryError(PainelError):
    """O banco rejeitou ou falhou ao executar uma consulta."""

    status_code = 502


class ValidationError(PainelError):
    """Entrada inválida (período, loja obrigatória, faixa de nota)."""

    status_code = 422


class RecordNotFoundError(PainelError):
    status_code = 404
