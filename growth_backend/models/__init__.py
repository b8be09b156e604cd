from growth_backend.models.category import Category
from growth_backend.models.product import Product
from growth_backend.models.budget_entry import BudgetEntry
from growth_backend.models.ad_product import AdProductEntry, TargetStatus
from growth_backend.models.selling_target import SellingTargetEntry

__all__ = [
    "Category",
    "Product",
    "BudgetEntry",
    "AdProductEntry",
    "TargetStatus",
    "SellingTargetEntry",
]
