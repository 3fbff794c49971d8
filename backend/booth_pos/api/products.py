"""
Catalog API Endpoints
Categories and products for the sales screen and the product manager
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from booth_pos.api.deps import get_product_repository, http_error
from booth_pos.core.exceptions import PosError
from booth_pos.domain.product import CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate
from booth_pos.repositories.product_repository import ProductRepository

router = APIRouter()


@router.get("/categories")
async def get_categories(repo: ProductRepository = Depends(get_product_repository)):
    """List categories ordered by label"""
    try:
        categories = repo.list_categories()
    except PosError as e:
        raise http_error(e)

    return {
        "status": "success",
        "count": len(categories),
        "data": [category.model_dump() for category in categories],
    }


@router.post("/categories", status_code=201)
async def create_category(
    payload: CategoryCreate,
    repo: ProductRepository = Depends(get_product_repository),
):
    """Create a category; the id is a lowercase slug, e.g. boisson-sans-alcool"""
    try:
        category = repo.create_category(payload)
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": category.model_dump()}


@router.put("/categories/{category_id}")
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    repo: ProductRepository = Depends(get_product_repository),
):
    try:
        category = repo.update_category(category_id, payload)
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": category.model_dump()}


@router.get("/products")
async def get_products(
    available_only: bool = Query(False, description="Only products currently on sale"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """List products ordered by name"""
    try:
        products = repo.find_all(available_only=available_only, category_id=category_id)
    except PosError as e:
        raise http_error(e)

    return {
        "status": "success",
        "count": len(products),
        "data": [product.model_dump() for product in products],
    }


@router.post("/products", status_code=201)
async def create_product(
    payload: ProductCreate,
    repo: ProductRepository = Depends(get_product_repository),
):
    try:
        product = repo.create(payload)
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": product.model_dump()}


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
):
    """
    Update name, price, category or availability

    Already committed transactions keep their own snapshot.
    """
    try:
        product = repo.update(product_id, payload)
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": product.model_dump()}


@router.post("/products/{product_id}/toggle-available")
async def toggle_product_available(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
):
    try:
        product = repo.toggle_available(product_id)
    except PosError as e:
        raise http_error(e)

    return {"status": "success", "data": product.model_dump()}
