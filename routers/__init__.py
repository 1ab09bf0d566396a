from .companies import router as companies_router
from .payments import router as payments_router
from .access import router as access_router

__all__ = ['companies_router', 'payments_router', 'access_router']
