"""
Test fixtures - in-memory SQLite database + HTTP client
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from growth_backend.database import Base, get_db, create_tables, enable_sqlite_foreign_keys
from growth_backend.main import app
from growth_backend.models.category import Category
from growth_backend.models.product import Product


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine)

    await create_tables(engine)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline catalog: 2 categories, 3 products"""
    clothing = Category(name="Clothing", slug="clothing")
    electronics = Category(name="Electronics", slug="electronics")
    db_session.add_all([clothing, electronics])
    await db_session.flush()

    tshirt = Product(name="Cotton T-Shirt", category_id=clothing.id,
                     buying_price=800, selling_price=1500, image="/img/tshirt.jpg")
    hoodie = Product(name="Hoodie", category_id=clothing.id, buying_price=1200, selling_price=2200)
    headphones = Product(name="Headphones", category_id=electronics.id,
                         buying_price=1200, selling_price=2000)
    db_session.add_all([tshirt, hoodie, headphones])
    await db_session.commit()

    return {
        "clothing": clothing,
        "electronics": electronics,
        "tshirt": tshirt,
        "hoodie": hoodie,
        "headphones": headphones,
    }


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
