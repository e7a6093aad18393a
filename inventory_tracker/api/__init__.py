"""FastAPI routes for the inventory tracker."""

from inventory_tracker.api.products import router as products_router

__all__ = ["products_router"]
