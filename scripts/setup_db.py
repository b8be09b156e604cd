"""
Database setup script - tables, starter catalog and a demo plan for the current month
"""
import asyncio
from datetime import date

from growth_backend.database import AsyncSessionLocal, create_tables, engine
from growth_backend.main import seed_catalog
from growth_backend.models.ad_product import AdProductEntry
from growth_backend.models.budget_entry import BudgetEntry
from growth_backend.repositories.growth_repository import SqlGrowthRepository
from growth_backend.services.planning_service import PlanningService
from growth_backend.utils.helpers import month_name

DEMO_BUDGET = [
    ("Marketing", 30000),
    ("Salary", 15000),
    ("Rent", 5000),
]

DEMO_PRODUCTS = [
    dict(product_name="Premium Cotton T-Shirt", buying_price=800, selling_price=1500,
         fb_ad_cost=150, delivery_cost=60, return_parcel_qty=4, damaged_product_qty=1,
         desired_profit_pct=10),
    dict(product_name="Smart LED Bulb", buying_price=300, selling_price=600,
         fb_ad_cost=80, delivery_cost=60, return_parcel_qty=2, damaged_product_qty=0,
         desired_profit_pct=15),
]


async def setup_database():
    """Create tables and seed initial data"""
    print("Creating database tables...")
    await create_tables()
    print("Tables created")

    today = date.today()
    month, year = month_name(today.month), today.year

    async with AsyncSessionLocal() as session:
        added = await seed_catalog(session)
        print(f"Catalog products added: {added}")

        service = PlanningService(SqlGrowthRepository(session))
        if await service.repository.list_budget_entries(month, year):
            print(f"{month} {year} already has a budget, skipping demo plan")
        else:
            for expense_type, amount in DEMO_BUDGET:
                await service.add_budget_entry(
                    BudgetEntry(month=month, year=year, expense_type=expense_type, amount=amount)
                )
            for values in DEMO_PRODUCTS:
                report = await service.add_product(AdProductEntry(month=month, year=year, **values))
            print(f"Demo plan for {month} {year}: share per product {report.budget_share:.2f}")

    await engine.dispose()
    print("\nDatabase setup complete!")


if __name__ == "__main__":
    asyncio.run(setup_database())
