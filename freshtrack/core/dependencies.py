from fastapi import Request

from freshtrack.repositories.base import CategoryRepository, ProductRepository


def get_product_repository(request: Request) -> ProductRepository:
    return request.app.state.product_repository


def get_category_repository(request: Request) -> CategoryRepository:
    return request.app.state.category_repository
