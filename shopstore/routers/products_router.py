"""
Product catalog endpoints.

GET  /api/v1/products          - filtered, sorted, paginated catalog page
GET  /api/v1/products/facets   - category/brand/status filter options
GET  /api/v1/products/{sku}    - single product by SKU
POST /api/v1/products          - create a product (multipart form)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from ..config import settings
from ..dependencies import get_catalog_service, get_product_repository
from ..domain.entities import ImageAttachment, ProductStatus
from ..logging_config import get_logger
from ..models import ErrorResponse, FacetsResponse, ProductPageResponse, ProductResponse
from ..repositories.product_repository import ProductRepository
from ..search.query_engine import ALL, QueryCriteria, SortOrder, run_query
from ..services.catalog_service import (
    SKU_EXISTS_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
    CatalogService,
    CreateProductResult,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get(
    "",
    response_model=ProductPageResponse,
    summary="Query the catalog",
)
async def list_products(
    search: str = Query(default="", max_length=100, description="Name substring"),
    category: str = Query(default=ALL, description="Category or 'all'"),
    brand: str = Query(default=ALL, description="Brand or 'all'"),
    status_filter: str = Query(default=ALL, alias="status", description="Status or 'all'"),
    min_price: str = Query(default="", description="Inclusive lower price bound"),
    max_price: str = Query(default="", description="Inclusive upper price bound"),
    sort: str = Query(
        default=SortOrder.RATING_HIGH.value,
        description="rating-high or rating-low",
    ),
    page: int = Query(default=1, description="1-based page number"),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductPageResponse:
    """
    Return one page of the catalog.

    Unparseable price bounds are ignored. Pages beyond ``total_pages``
    come back empty rather than as an error.
    """
    criteria = QueryCriteria(
        search=search,
        category=category,
        brand=brand,
        status=status_filter,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
    )
    result = run_query(repository.list(), criteria, settings.PAGE_SIZE)
    return ProductPageResponse.from_result(result)


@router.get(
    "/facets",
    response_model=FacetsResponse,
    summary="Filter options",
)
async def product_facets(
    repository: ProductRepository = Depends(get_product_repository),
) -> FacetsResponse:
    """List the categories and brands present in the catalog."""
    return FacetsResponse(
        categories=repository.categories(),
        brands=repository.brands(),
        statuses=ProductStatus.values(),
    )


@router.get(
    "/{sku}",
    response_model=ProductResponse,
    responses={404: {"description": "Unknown SKU", "model": ErrorResponse}},
    summary="Get a product by SKU",
)
async def get_product(
    sku: str,
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Look up a product; SKU matching ignores case."""
    product = repository.get_by_sku(sku)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "message": f"No product with SKU: {sku}",
                "details": {"sku": sku},
            },
        )
    return ProductResponse.from_product(product)


def _error_status(result: CreateProductResult) -> int:
    if result.errors.get("sku") == SKU_EXISTS_MESSAGE:
        return status.HTTP_409_CONFLICT
    if result.errors.get("image_file") == UPLOAD_FAILED_MESSAGE:
        return status.HTTP_502_BAD_GATEWAY
    return 422


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "SKU already exists", "model": ErrorResponse},
        422: {"description": "Invalid product form", "model": ErrorResponse},
        502: {"description": "Image upload failed", "model": ErrorResponse},
    },
    summary="Create a product",
)
async def create_product(
    name: str = Form(default=""),
    sku: str = Form(default=""),
    price: str = Form(default=""),
    quantity: str = Form(default=""),
    category: str = Form(default=""),
    brand: str = Form(default=""),
    color: str = Form(default=""),
    status_value: str = Form(default=ProductStatus.AVAILABLE.value, alias="status"),
    in_stock: bool = Form(default=True),
    image_file: Optional[UploadFile] = File(default=None),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductResponse:
    """
    Create a product from form fields and an optional image file.

    Field errors are returned under ``details`` keyed by field name.
    """
    attachment = None
    if image_file is not None and image_file.filename:
        attachment = ImageAttachment(
            filename=image_file.filename,
            content_type=image_file.content_type or "application/octet-stream",
            data=await image_file.read(),
        )

    result = await service.create_product(
        {
            "name": name,
            "sku": sku,
            "price": price,
            "quantity": quantity,
            "category": category,
            "brand": brand,
            "color": color,
            "status": status_value,
            "in_stock": in_stock,
            "image_file": attachment,
        }
    )

    if not result.ok:
        logger.info("create_product_rejected", errors=result.errors)
        raise HTTPException(
            status_code=_error_status(result),
            detail={
                "error": "invalid_product",
                "message": "Please fix the form errors",
                "details": result.errors,
            },
        )

    return ProductResponse.from_product(result.product)
