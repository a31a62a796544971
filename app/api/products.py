"""Product CRUD API endpoints."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import NOT_FOUND_MESSAGE, StoreError
from app.schemas.errors import ErrorResponse, MessageResponse, ValidationErrorResponse
from app.schemas.product import (
    ProductCreate,
    ProductDataResponse,
    ProductListResponse,
    ProductMessageResponse,
    ProductSummaryDataResponse,
    ProductUpdate,
)
from app.services.product_store import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])

BAD_REQUEST = {400: {"model": ValidationErrorResponse, "description": "Bad Request - invalid input data"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found"}}
SERVER_ERROR = {500: {"model": ErrorResponse, "description": "Database error"}}

# Ids fit a signed 64-bit integer
ProductId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1, description="The Product ID")]


def get_product_store(db: Session = Depends(get_db)) -> ProductStore:
    """Dependency for the product store bound to the request's session."""
    return ProductStore(db)


def ensure_exists(store: ProductStore, product_id: int) -> None:
    """404 before any write is attempted."""
    if store.get_by_key(product_id) is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)


@router.get("", response_model=ProductListResponse, responses=SERVER_ERROR)
@router.get("/", response_model=ProductListResponse, include_in_schema=False)
def list_products(store: ProductStore = Depends(get_product_store)):
    """
    Get a list of products.

    Products are sorted by price, most expensive first. ``updatedAt`` is
    not included.
    """
    try:
        products = store.list_all()
    except StoreError as e:
        logger.exception(f"Failed to list products: {e}")
        raise HTTPException(status_code=500, detail="Error al obtener los productos")

    return ProductListResponse(data=products)


@router.get(
    "/{product_id}",
    response_model=ProductSummaryDataResponse,
    responses={**NOT_FOUND, **BAD_REQUEST},
)
def get_product(product_id: ProductId, store: ProductStore = Depends(get_product_store)):
    """Get a product by its unique ID."""
    product = store.get_by_key(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)

    return ProductSummaryDataResponse(data=product)


@router.post(
    "",
    response_model=ProductMessageResponse,
    status_code=201,
    responses={**BAD_REQUEST, **SERVER_ERROR},
)
@router.post(
    "/", response_model=ProductMessageResponse, status_code=201, include_in_schema=False
)
def create_product(
    product: ProductCreate, store: ProductStore = Depends(get_product_store)
):
    """Create a new product."""
    try:
        db_product = store.create(product.model_dump())
    except StoreError as e:
        logger.exception(f"Failed to create product: {e}")
        raise HTTPException(status_code=500, detail="Error al crear el producto")

    return ProductMessageResponse(msg="Producto creado", data=db_product)


@router.put(
    "/{product_id}",
    response_model=ProductMessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
)
def update_product(
    product_id: ProductId,
    product_update: ProductUpdate,
    store: ProductStore = Depends(get_product_store),
):
    """Replace a product's name, price and availability."""
    ensure_exists(store, product_id)

    try:
        db_product = store.update(product_id, product_update.model_dump())
    except StoreError as e:
        logger.exception(f"Failed to update product {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Error al actualizar el producto")

    return ProductMessageResponse(msg="Producto actualizado", data=db_product)


@router.patch(
    "/{product_id}",
    response_model=ProductDataResponse,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
)
def update_availability(
    product_id: ProductId, store: ProductStore = Depends(get_product_store)
):
    """Flip a product's availability."""
    ensure_exists(store, product_id)

    try:
        db_product = store.toggle_availability(product_id)
    except StoreError as e:
        logger.exception(f"Failed to toggle availability of product {product_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Error al actualizar la disponibilidad del producto",
        )

    return ProductDataResponse(data=db_product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
)
def delete_product(product_id: ProductId, store: ProductStore = Depends(get_product_store)):
    """Delete a product by its unique ID."""
    ensure_exists(store, product_id)

    try:
        store.delete(product_id)
    except StoreError as e:
        logger.exception(f"Failed to delete product {product_id}: {e}")
        raise HTTPException(
            status_code=500, detail="Hubo un error al eliminar el producto."
        )

    return MessageResponse(msg="Producto eliminado correctamente")
