"""
Repositório base para registros por período (analista, marketing, operacional).

As tabelas mantêm os nomes de coluna do schema original (data_inicio, loja_id...);
cada subclasse declara o mapeamento campo de domínio -> coluna e o SELECT usa
aliases para devolver linhas já com os nomes de domínio.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, ClassVar, Generic, Mapping, Optional, TypeVar

from painel.core.config import settings
from painel.core.errors import QueryError, RecordNotFoundError, ValidationError
from painel.domain.filters import DashboardFilters
from painel.infra.db import execute, execute_returning, fetch_all, fetch_one

R = TypeVar("R")


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_int(value: Any) -> int:
    return int(value or 0)


class PeriodRecordRepository(Generic[R]):
    """Consulta, inclusão, alteração e exclusão de uma tabela de registros por período."""

    TABLE: ClassVar[str]
    COLUMNS: ClassVar[dict[str, str]]  # campo de domínio -> coluna

    def _from_row(self, row: Mapping[str, Any]) -> R:  # pragma: no cover - abstrato
        raise NotImplementedError

    @classmethod
    def _select_list(cls) -> str:
        return ", ".join(f"{column} AS {name}" for name, column in cls.COLUMNS.items())

    @classmethod
    def _writable(cls, fields: Mapping[str, Any]) -> dict[str, Any]:
        # id nunca é gravável
        unknown = (set(fields) - set(cls.COLUMNS)) | ({"id"} & set(fields))
        if unknown:
            raise ValidationError(
                f"Campos inválidos para {cls.TABLE}",
                {"campos": sorted(unknown)},
            )
        return {cls.COLUMNS[name]: value for name, value in fields.items()}

    def list_in_range(self, filters: DashboardFilters) -> list[R]:
        """Registros do filtro, ordenados por data_inicio crescente."""
        conditions, params = filters.to_sql_conditions()
        sql = f"""
            SELECT {self._select_list()}
            FROM {self.TABLE}
            WHERE {" AND ".join(conditions)}
            ORDER BY data_inicio ASC, id ASC
        """
        rows = fetch_all(sql, params, timeout_ms=settings.QUERY_TIMEOUT_MS)
        return [self._from_row(row) for row in rows]

    def get(self, record_id: int) -> Optional[R]:
        sql = f"SELECT {self._select_list()} FROM {self.TABLE} WHERE id = :id"
        row = fetch_one(sql, {"id": record_id})
        return self._from_row(row) if row else None

    def insert(self, fields: Mapping[str, Any], user_id: Optional[str] = None) -> R:
        values = self._writable(fields)
        if user_id:
            values["user_id"] = user_id
        columns = ", ".join(values)
        placeholders = ", ".join(f":{column}" for column in values)
        sql = f"""
            INSERT INTO {self.TABLE} ({columns})
            VALUES ({placeholders})
            RETURNING {self._select_list()}
        """
        row = execute_returning(sql, values)
        if row is None:
            raise QueryError(f"INSERT em {self.TABLE} não retornou a linha criada")
        return self._from_row(row)

    def update(self, record_id: int, fields: Mapping[str, Any]) -> R:
        values = self._writable(fields)
        if not values:
            current = self.get(record_id)
            if current is None:
                raise RecordNotFoundError(f"Registro {record_id} não encontrado em {self.TABLE}")
            return current
        assignments = ", ".join(f"{column} = :{column}" for column in values)
        sql = f"""
            UPDATE {self.TABLE}
            SET {assignments}
            WHERE id = :id
            RETURNING {self._select_list()}
        """
        row = execute_returning(sql, {**values, "id": record_id})
        if row is None:
            raise RecordNotFoundError(f"Registro {record_id} não encontrado em {self.TABLE}")
        return self._from_row(row)

    def delete(self, record_id: int) -> None:
        affected = execute(f"DELETE FROM {self.TABLE} WHERE id = :id", {"id": record_id})
        if not affected:
            raise RecordNotFoundError(f"Registro {record_id} não encontrado em {self.TABLE}")
