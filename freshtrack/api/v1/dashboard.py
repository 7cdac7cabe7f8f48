from fastapi import APIRouter, Depends

from freshtrack.core.dependencies import get_product_repository
from freshtrack.repositories.base import ProductRepository
from freshtrack.schemas.dashboard import DashboardSummary
from freshtrack.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(
    products: ProductRepository = Depends(get_product_repository),
):
    return await DashboardService(products).summary.first()
