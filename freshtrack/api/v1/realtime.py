from contextlib import aclosing
from fastapi import APIRouter, Depends, Query, Request
from sse_starlette.sse import EventSourceResponse
from typing import Optional
import json
import logging

from freshtrack.api.v1.products import build_list_service
from freshtrack.core.dependencies import get_category_repository, get_product_repository
from freshtrack.domain.product import ProductFilter, ProductSort
from freshtrack.repositories.base import CategoryRepository, ProductRepository
from freshtrack.schemas.product import ProductResponse
from freshtrack.services.dashboard_service import DashboardService
from freshtrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["Real-time"])

# Un échec de lecture termine le flux ; le client peut se reconnecter
STORAGE_ERROR_EVENT = {
    "event": "error",
    "data": json.dumps({"detail": "A storage operation failed."}),
}


@router.get("/products")
async def stream_products(
    request: Request,
    product_filter: Optional[ProductFilter] = Query(None, alias="filter"),
    sort: Optional[ProductSort] = None,
    category: Optional[str] = None,
    products: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
):
    service = build_list_service(products, categories, product_filter, sort, category)

    async def event_generator():
        # La sortie du générateur (déconnexion) ferme l'abonnement
        try:
            async with aclosing(service.products.values()) as snapshots:
                async for snapshot in snapshots:
                    if await request.is_disconnected():
                        break
                    yield {
                        "event": "products",
                        "data": json.dumps(
                            [
                                ProductResponse.from_product(p).model_dump(mode="json")
                                for p in snapshot
                            ]
                        ),
                    }
        except StorageError:
            yield STORAGE_ERROR_EVENT
        logger.debug("Product stream closed")

    return EventSourceResponse(event_generator())


@router.get("/dashboard")
async def stream_dashboard(
    request: Request,
    products: ProductRepository = Depends(get_product_repository),
):
    service = DashboardService(products)

    async def event_generator():
        try:
            async with aclosing(service.summary.values()) as summaries:
                async for summary in summaries:
                    if await request.is_disconnected():
                        break
                    yield {"event": "dashboard", "data": summary.model_dump_json()}
        except StorageError:
            yield STORAGE_ERROR_EVENT
        logger.debug("Dashboard stream closed")

    return EventSourceResponse(event_generator())
