"""
Repositório de lojas.
Centraliza todo acesso a dados relacionados a lojas.
"""

from typing import Optional, Sequence

from painel.core.errors import QueryError
from painel.domain.models import Store
from painel.infra.db import execute_returning, fetch_all

_SELECT = """
    SELECT id, nome AS name, endereco AS address,
           telefone AS phone, responsavel AS manager_name
    FROM lojas
"""


class StoreRepository:
    """
    Repositório para acesso a dados de lojas.
    Encapsula toda lógica SQL relacionada a lojas.
    """

    @staticmethod
    def get_all(store_ids: Optional[Sequence[int]] = None) -> list[Store]:
        """
        Obtém lista de todas as lojas, ordenadas por nome.

        Returns:
            Lista de lojas
        """
        params: dict[str, list[int]] = {}
        query = _SELECT
        if store_ids:
            query += " WHERE id = ANY(:store_ids)"
            params["store_ids"] = list(store_ids)
        query += " ORDER BY nome"
        return [Store(**row) for row in fetch_all(query, params or None, timeout_ms=2000)]

    @staticmethod
    def insert(
        name: str,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        manager_name: Optional[str] = None,
    ) -> Store:
        row = execute_returning(
            """
            INSERT INTO lojas (nome, endereco, telefone, responsavel)
            VALUES (:nome, :endereco, :telefone, :responsavel)
            RETURNING id, nome AS name, endereco AS address,
                      telefone AS phone, responsavel AS manager_name
            """,
            {"nome": name, "endereco": address, "telefone": phone, "responsavel": manager_name},
        )
        if row is None:
            raise QueryError("INSERT em lojas não retornou a linha criada")
        return Store(**row)
