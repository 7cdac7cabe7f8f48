from fastapi import APIRouter

from freshtrack.api.v1 import products, categories, dashboard, realtime

api_router = APIRouter()

api_router.include_router(products.router)
api_router.include_router(categories.router)
api_router.include_router(dashboard.router)
api_router.include_router(realtime.router)

__all__ = ["api_router"]
