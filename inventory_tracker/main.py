"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from inventory_tracker.api.products import router as products_router
from inventory_tracker.config import settings
from inventory_tracker.database import async_engine, init_db
from inventory_tracker.services.store import ProductStore

logging.getLogger("inventory_tracker").setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables, then load the product collection into the store."""
    await init_db()
    store = ProductStore()
    await store.load()
    app.state.store = store
    yield
    await async_engine.dispose()


app = FastAPI(
    title="Inventory Tracker",
    description="Single-user product inventory with expiry tracking and stock statistics",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Include API routers
app.include_router(products_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
