"""
Logging estruturado do painel.

Campos extras viram pares key=value. Durante um ciclo do painel os campos do
ciclo (request_id, loja) ficam num ContextVar e são anexados a toda linha de
log emitida dentro dele, inclusive nas threads das consultas.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from painel.core.config import settings


_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'message',
    'timestamp', 'taskName',
})

_cycle_fields: ContextVar[Dict[str, Any]] = ContextVar("painel_cycle_fields", default={})


@contextmanager
def cycle_context(**fields: Any) -> Iterator[None]:
    """Anexa `fields` a todos os logs emitidos dentro do bloco."""
    token = _cycle_fields.set({**_cycle_fields.get(), **fields})
    try:
        yield
    finally:
        _cycle_fields.reset(token)


class CycleContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _cycle_fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredLogger:
    """Logger com campos nomeados: `log.info("msg", store_id=1)`."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc: Optional[Exception] = None, **kwargs):
        self.logger.error(message, exc_info=exc, extra=kwargs)


class StructuredFormatter(logging.Formatter):
    """[timestamp] LEVEL logger: mensagem | campo=valor | ..."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.default_time_format)
        line = f"[{timestamp}] {record.levelname} {record.name}: {record.getMessage()}"

        fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        ]
        if fields:
            line = f"{line} | {' | '.join(fields)}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configura o logger raiz: console sempre, arquivo quando `log_file` é informado.

    Args:
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL
        log_file: Caminho do arquivo de log (opcional)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(numeric_level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = StructuredFormatter()
    context_filter = CycleContextFilter()
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)

    # o SQLAlchemy loga cada statement em INFO
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)


app_logger = get_logger("painel")
db_logger = get_logger("painel.db")
api_logger = get_logger("painel.api")
dashboard_logger = get_logger("painel.dashboard")


def init_app_logging():
    """Configura o logging a partir das settings."""
    log_file = settings.LOG_FILE_PATH if settings.LOG_TO_FILE else None
    configure_logging(settings.LOG_LEVEL, log_file)
    app_logger.info(
        "Application logging initialized",
        level=settings.LOG_LEVEL,
        log_file=log_file,
        env=settings.ENV,
    )
