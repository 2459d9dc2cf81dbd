"""API routers module."""

from . import auth, dashboard, health, registros, stores

__all__ = [
    "auth",
    "dashboard",
    "health",
    "registros",
    "stores",
]
