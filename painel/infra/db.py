from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Result
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError
from painel.core.config import settings
from painel.core.errors import ConnectivityError, PainelError, QueryError
from painel.core.logging import db_logger

# -----------------------------------------------------------------------------
# 1) Engine (pool de conexões)
# -----------------------------------------------------------------------------

_engine: Optional[Engine] = None

def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.DATABASE_URL,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
            future=True,
        )
    return _engine

# -----------------------------------------------------------------------------
# 2) Tradução de erros do driver para a taxonomia do painel
# -----------------------------------------------------------------------------

_CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, DisconnectionError)

def translate_db_error(exc: Exception) -> PainelError:
    if isinstance(exc, PainelError):
        return exc
    if isinstance(exc, _CONNECTIVITY_ERRORS):
        return ConnectivityError("Sem conexão com o banco de dados", {"error": str(exc)})
    return QueryError("Erro ao consultar o banco de dados", {"error": str(exc)})

@contextmanager
def _db_errors(sql: str) -> Generator[None, None, None]:
    try:
        yield
    except SQLAlchemyError as exc:
        err = translate_db_error(exc)
        db_logger.warning(
            "Falha no banco",
            kind=type(err).__name__,
            statement=" ".join(sql.split())[:120],
        )
        raise err from exc

# -----------------------------------------------------------------------------
# 3) Healthcheck (pronto para /healthz e /readyz)
# -----------------------------------------------------------------------------

def health_check() -> Dict[str, Any]:
    eng = get_engine()
    with _db_errors("SELECT 1"), eng.connect() as conn:
        conn.execute(text("SELECT 1"))
        db = conn.execute(text("SELECT current_database()")).scalar()
        user = conn.execute(text("SELECT current_user")).scalar_one()
        return {
            "ok": True,
            "database": db,
            "user": user,
        }

# -----------------------------------------------------------------------------
# 4) Helpers de consulta (SELECT) e execução (DML)
# -----------------------------------------------------------------------------

def fetch_all(sql: str, params: Optional[Dict[str, Any]] = None,
              timeout_ms: Optional[int] = None) -> List[Dict[str, Any]]:
    eng = get_engine()
    with _db_errors(sql), eng.begin() as conn:
        if timeout_ms:
            conn.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))
        result: Result = conn.execute(text(sql), params or {})
        rows = result.mappings().all()
        return [dict(r) for r in rows]

def fetch_one(sql: str, params: Optional[Dict[str, Any]] = None,
              timeout_ms: Optional[int] = None) -> Optional[Dict[str, Any]]:
    rows = fetch_all(sql, params=params, timeout_ms=timeout_ms)
    return rows[0] if rows else None

def execute(sql: str, params: Optional[Dict[str, Any]] = None) -> int:
    """Executa DML e devolve o número de linhas afetadas."""
    eng = get_engine()
    with _db_errors(sql), eng.begin() as conn:
        result = conn.execute(text(sql), params or {})
        return result.rowcount

def execute_returning(sql: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Executa INSERT/UPDATE ... RETURNING e devolve a primeira linha."""
    eng = get_engine()
    with _db_errors(sql), eng.begin() as conn:
        row = conn.execute(text(sql), params or {}).mappings().first()
        return dict(row) if row else None
