# routers/__init__.py

from fastapi import APIRouter

from .permissions import router as permissions_router
from .work_orders import router as work_orders_router
from .files import router as files_router
from .client_hub import router as client_hub_router
from .health import router as health_router


api_router = APIRouter()

api_router.include_router(permissions_router)
api_router.include_router(work_orders_router)
api_router.include_router(files_router)
api_router.include_router(client_hub_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
