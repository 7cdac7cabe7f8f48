from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from freshtrack.core.config import settings
from freshtrack.core.dependencies import get_category_repository, get_product_repository
from freshtrack.domain.product import Product, ProductFilter, ProductSort
from freshtrack.repositories.base import CategoryRepository, ProductRepository
from freshtrack.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from freshtrack.services.product_list_service import ProductListService
from freshtrack.utils.exceptions import ProductNotFoundException

router = APIRouter(prefix="/products", tags=["Products"])

NULLABLE_FIELDS = {"barcode", "notes", "image_uri"}


def _responses(products: List[Product]) -> List[ProductResponse]:
    return [ProductResponse.from_product(product) for product in products]


def build_list_service(
    products: ProductRepository,
    categories: CategoryRepository,
    product_filter: Optional[ProductFilter],
    sort: Optional[ProductSort],
    category: Optional[str],
) -> ProductListService:
    service = ProductListService(products, categories)
    if product_filter:
        service.set_filter(product_filter)
    if sort:
        service.set_sort(sort)
    if category:
        service.select_category(category)
    return service


@router.get("", response_model=List[ProductResponse])
async def list_products(
    product_filter: Optional[ProductFilter] = Query(None, alias="filter"),
    sort: Optional[ProductSort] = None,
    category: Optional[str] = None,
    products: ProductRepository = Depends(get_product_repository),
    categories: CategoryRepository = Depends(get_category_repository),
):
    """Produits actifs, filtrés et triés"""
    service = build_list_service(products, categories, product_filter, sort, category)
    return _responses(await service.products.first())


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    request: ProductCreate,
    products: ProductRepository = Depends(get_product_repository),
):
    product = Product.create(**request.model_dump())
    await products.insert_product(product)
    return ProductResponse.from_product(product)


@router.get("/expiring", response_model=List[ProductResponse])
async def list_expiring_products(
    days: int = Query(settings.NOTIFICATION_DAYS_IN_ADVANCE, ge=0, le=365),
    products: ProductRepository = Depends(get_product_repository),
):
    return _responses(await products.get_expiring_products(days))


@router.get("/expired", response_model=List[ProductResponse])
async def list_expired_products(
    products: ProductRepository = Depends(get_product_repository),
):
    return _responses(await products.get_expired_products().first())


@router.get("/barcode/{barcode}", response_model=ProductResponse)
async def get_product_by_barcode(
    barcode: str, products: ProductRepository = Depends(get_product_repository)
):
    product = await products.get_product_by_barcode(barcode)
    if not product:
        raise ProductNotFoundException()
    return ProductResponse.from_product(product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str, products: ProductRepository = Depends(get_product_repository)
):
    product = await products.get_product_by_id_once(product_id)
    if not product:
        raise ProductNotFoundException()
    return ProductResponse.from_product(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    request: ProductUpdate,
    products: ProductRepository = Depends(get_product_repository),
):
    """Modifier un produit (l'id ne change jamais)"""
    product = await products.get_product_by_id_once(product_id)
    if not product:
        raise ProductNotFoundException()

    changes = {
        key: value
        for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    updated = product.with_changes(**changes)
    await products.update_product(updated)
    return ProductResponse.from_product(updated)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: str, products: ProductRepository = Depends(get_product_repository)
):
    product = await products.get_product_by_id_once(product_id)
    if not product:
        raise ProductNotFoundException()

    await products.delete_product(product_id)
    return None


@router.post("/{product_id}/consume", response_model=ProductResponse)
async def consume_product(
    product_id: str, products: ProductRepository = Depends(get_product_repository)
):
    if not await products.get_product_by_id_once(product_id):
        raise ProductNotFoundException()

    await products.mark_as_consumed(product_id)
    return ProductResponse.from_product(await products.get_product_by_id_once(product_id))


@router.post("/{product_id}/discard", response_model=ProductResponse)
async def discard_product(
    product_id: str, products: ProductRepository = Depends(get_product_repository)
):
    if not await products.get_product_by_id_once(product_id):
        raise ProductNotFoundException()

    await products.mark_as_discarded(product_id)
    return ProductResponse.from_product(await products.get_product_by_id_once(product_id))
