from fastapi import APIRouter, Depends, HTTPException
from typing import List

from freshtrack.core.dependencies import get_category_repository
from freshtrack.domain.product import Category
from freshtrack.repositories.base import CategoryRepository
from freshtrack.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from freshtrack.utils.exceptions import CategoryNotFoundException

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    categories: CategoryRepository = Depends(get_category_repository),
):
    return await categories.get_all_categories_once()


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    request: CategoryCreate,
    categories: CategoryRepository = Depends(get_category_repository),
):
    if await categories.get_category_by_name(request.name):
        raise HTTPException(status_code=409, detail="Category already exists")

    category = Category(**request.model_dump())
    await categories.insert_category(category)
    return category


@router.put("/{name}", response_model=CategoryResponse)
async def update_category(
    name: str,
    request: CategoryUpdate,
    categories: CategoryRepository = Depends(get_category_repository),
):
    """Le nom est la clé : un renommage passe par suppression + création"""
    category = await categories.get_category_by_name(name)
    if not category:
        raise CategoryNotFoundException()

    changes = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    updated = category.model_copy(update=changes)
    await categories.update_category(updated)
    return updated


@router.delete("/{name}", status_code=204)
async def delete_category(
    name: str, categories: CategoryRepository = Depends(get_category_repository)
):
    # Les produits de cette catégorie ne sont pas modifiés
    if not await categories.get_category_by_name(name):
        raise CategoryNotFoundException()

    await categories.delete_category(name)
    return None
