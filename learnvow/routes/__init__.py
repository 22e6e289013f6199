# This file makes the 'routes' directory a Python package.

from fastapi import APIRouter

from learnvow.core.config import settings

from .auth_routes import router as auth_router
from .book_routes import router as book_router
from .progress_routes import router as progress_router
from .purchase_routes import router as purchase_router
from .payment_routes import router as payment_router
from .admin_routes import router as admin_router
from .file_routes import router as file_router
from .health_routes import router as health_router

api_router_v1 = APIRouter(prefix=settings.API_V1_STR)

# User-facing routes
api_router_v1.include_router(auth_router)
api_router_v1.include_router(book_router)
api_router_v1.include_router(progress_router)
api_router_v1.include_router(purchase_router)
api_router_v1.include_router(payment_router)
api_router_v1.include_router(file_router)

# Admin routes are prefixed with /admin in admin_routes.py
api_router_v1.include_router(admin_router)

__all__ = [
    "api_router_v1",
    "health_router",  # Mounted unversioned by main.py
]
