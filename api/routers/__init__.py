"""
API Routers Package
"""
from .health import router as health_router
from .express import router as express_router
from .exceptions import router as exceptions_router
from .containers import router as containers_router
from .inventory import router as inventory_router

__all__ = [
    'health_router',
    'express_router',
    'exceptions_router',
    'containers_router',
    'inventory_router'
]
