"""
Repositórios para acesso a dados.
Implementam a camada de persistência seguindo Clean Architecture.
"""

from .analista_repository import AnalistaRepository
from .marketing_repository import MarketingRepository
from .operacional_repository import OperacionalRepository
from .store_repository import StoreRepository

__all__ = [
    "AnalistaRepository",
    "MarketingRepository",
    "OperacionalRepository",
    "StoreRepository",
]
