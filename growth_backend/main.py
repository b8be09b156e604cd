"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from growth_backend.config import get_settings
from growth_backend.database import engine, AsyncSessionLocal, create_tables
from growth_backend.models import Category, Product
from growth_backend.api import budget, ad_products, selling_targets
from growth_backend.api import categories, products, dashboard, coach
from growth_backend.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

DEFAULT_CATEGORIES = [
    ("Clothing", "clothing"),
    ("Electronics", "electronics"),
    ("Home & Garden", "home-garden"),
    ("Sports & Outdoors", "sports-outdoors"),
    ("Beauty & Health", "beauty-health"),
]

# (name, category slug, buying price, selling price)
DEFAULT_PRODUCTS = [
    ("Premium Cotton T-Shirt", "clothing", 800, 1500),
    ("Wireless Bluetooth Headphones", "electronics", 1200, 2000),
    ("Smart LED Bulb", "home-garden", 300, 600),
    ("Yoga Mat Premium", "sports-outdoors", 500, 900),
    ("Organic Face Cream", "beauty-health", 400, 750),
]


async def seed_catalog(session: AsyncSession) -> int:
    """Insert the starter catalog into an empty database. Returns products added."""
    existing = await session.execute(select(Product))
    if existing.scalars().first():
        return 0

    by_slug = {}
    for name, slug in DEFAULT_CATEGORIES:
        category = Category(name=name, slug=slug, is_active=True)
        session.add(category)
        by_slug[slug] = category
    await session.flush()

    for name, slug, buying, selling in DEFAULT_PRODUCTS:
        session.add(Product(
            name=name,
            category_id=by_slug[slug].id,
            buying_price=buying,
            selling_price=selling,
            is_active=True,
        ))
    await session.commit()
    return len(DEFAULT_PRODUCTS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("Database tables created")

    async with AsyncSessionLocal() as session:
        added = await seed_catalog(session)
        if added:
            logger.info(f"Seeded {added} catalog products")

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(budget.router, prefix="/api/budget", tags=["Budget"])
app.include_router(ad_products.router, prefix="/api/ad-products", tags=["Ad Products"])
app.include_router(selling_targets.router, prefix="/api/selling-targets", tags=["Selling Targets"])
app.include_router(categories.router, prefix="/api/categories", tags=["Catalog"])
app.include_router(products.router, prefix="/api/products", tags=["Catalog"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(coach.router, prefix="/api/coach", tags=["Growth Coach"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "growth_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
