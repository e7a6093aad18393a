"""FastAPI routes for product management."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from inventory_tracker.config import settings
from inventory_tracker.services.dates import format_date, is_expired
from inventory_tracker.services.inventory import (
    FilterMode,
    calculate_totals,
    filter_products,
)
from inventory_tracker.services.numbers import format_currency, format_weight, quantize_money
from inventory_tracker.services.products import (
    CATEGORIES,
    Product,
    ProductInput,
    ProductValidationError,
    product_value,
    stock_status,
)
from inventory_tracker.services.store import ProductNotFoundError, ProductStore

DELETE_CONFIRMATION_MESSAGE = "Tem certeza que deseja excluir este produto?"
OUT_OF_STOCK_LABEL = "Em falta"

router = APIRouter(prefix="/products", tags=["products"])


def get_store(request: Request) -> ProductStore:
    """Dependency that provides the application's product store."""
    return request.app.state.store


StoreDep = Annotated[ProductStore, Depends(get_store)]


class CamelModel(BaseModel):
    """Response schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductView(CamelModel):
    """Schema for a product as shown in the list and edit form."""

    id: int
    name: str
    quantity: int
    price: float
    weight: float
    expiry_date: str | None = None
    category: str
    status: str
    status_color: str
    expired: bool
    expiry_display: str
    quantity_display: str
    price_display: str
    weight_display: str | None = None
    total_value: float
    total_value_display: str


class ProductListResponse(CamelModel):
    """Response schema for the product list endpoint."""

    items: list[ProductView]
    total_items: int
    filter: FilterMode
    search: str


class StatsResponse(CamelModel):
    """Response schema for the stats header."""

    count: int
    in_stock_count: int
    total_value: float
    total_value_display: str


class CategoriesResponse(CamelModel):
    """Response schema for the category picker."""

    categories: list[str]
    default_category: str


class QuantityAdjustment(BaseModel):
    """Request body for a quantity increment or decrement."""

    delta: int = Field(description="Units to add (negative to remove)")


def build_product_view(product: Product, today: date | None = None) -> ProductView:
    """Attach display fields to a product."""
    status = stock_status(product, today)
    value = quantize_money(product_value(product))
    quantity_display = (
        OUT_OF_STOCK_LABEL if product.quantity == 0 else f"{product.quantity} unidades"
    )
    weight_display = format_weight(product.weight) if product.weight > 0 else None

    return ProductView(
        id=product.id,
        name=product.name,
        quantity=product.quantity,
        price=product.price,
        weight=product.weight,
        expiry_date=product.expiry_date,
        category=product.category,
        status=status.value,
        status_color=status.color,
        expired=is_expired(product.expiry_date, today),
        expiry_display=format_date(product.expiry_date),
        quantity_display=quantity_display,
        price_display=format_currency(product.price),
        weight_display=weight_display,
        total_value=float(value),
        total_value_display=format_currency(value),
    )


@router.get("", response_model=ProductListResponse)
async def list_products(
    store: StoreDep,
    filter_mode: Annotated[
        FilterMode,
        Query(alias="filter", description="Filter mode for the product list"),
    ] = FilterMode.ALL,
    search: Annotated[
        str,
        Query(description="Case-insensitive text matched against name and category"),
    ] = "",
) -> ProductListResponse:
    """List products visible under a filter mode and search text.

    Products are returned newest first.
    """
    today = date.today()
    visible = filter_products(store.products, filter_mode, search, today)
    items = [build_product_view(product, today) for product in visible]
    return ProductListResponse(
        items=items,
        total_items=len(items),
        filter=filter_mode,
        search=search,
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(store: StoreDep) -> StatsResponse:
    """Summary statistics over the whole collection, ignoring filters."""
    totals = calculate_totals(store.products)
    return StatsResponse(
        count=totals.count,
        in_stock_count=totals.in_stock_count,
        total_value=float(totals.total_value),
        total_value_display=format_currency(totals.total_value),
    )


@router.get("/categories", response_model=CategoriesResponse)
async def get_categories() -> CategoriesResponse:
    """Categories offered by the product form."""
    return CategoriesResponse(
        categories=list(CATEGORIES),
        default_category=settings.default_category,
    )


@router.get("/{product_id}", response_model=ProductView)
async def get_product(product_id: int, store: StoreDep) -> ProductView:
    """Fetch a single product, e.g. to prefill the edit form.

    Raises:
        HTTPException: 404 if the product does not exist.
    """
    try:
        product = store.get(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return build_product_view(product)


@router.post("", response_model=ProductView, status_code=201)
async def create_product(data: ProductInput, store: StoreDep) -> ProductView:
    """Create a product from form input.

    Raises:
        HTTPException: 422 if the name is blank.
    """
    try:
        product = await store.add(data)
    except ProductValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return build_product_view(product)


@router.put("/{product_id}", response_model=ProductView)
async def update_product(
    product_id: int,
    data: ProductInput,
    store: StoreDep,
) -> ProductView:
    """Replace a product's fields from form input.

    Raises:
        HTTPException: 404 if the product does not exist.
        HTTPException: 422 if the name is blank.
    """
    try:
        product = await store.update(product_id, data)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ProductValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return build_product_view(product)


@router.post("/{product_id}/quantity", response_model=ProductView)
async def adjust_product_quantity(
    product_id: int,
    adjustment: QuantityAdjustment,
    store: StoreDep,
) -> ProductView:
    """Increment or decrement a product's quantity, never below zero.

    Raises:
        HTTPException: 404 if the product does not exist.
    """
    product = await store.adjust_quantity(product_id, adjustment.delta)
    if product is None:
        raise HTTPException(
            status_code=404,
            detail=f"Product {product_id} not found",
        )
    return build_product_view(product)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    store: StoreDep,
    confirm: Annotated[
        bool,
        Query(description="Must be true to actually delete the product"),
    ] = False,
) -> None:
    """Delete a product after explicit confirmation.

    Deleting an unknown id is a no-op.

    Raises:
        HTTPException: 409 if ``confirm`` is not set.
    """
    if not confirm:
        raise HTTPException(status_code=409, detail=DELETE_CONFIRMATION_MESSAGE)
    await store.remove(product_id)
