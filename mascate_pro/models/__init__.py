from mascate_pro.models.user import User
from mascate_pro.models.inventory import Product, Category, StockMovement
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.models.configuration import Configuration

__all__ = [
    "User",
    "Product", "Category", "StockMovement",
    "ActivityLog",
    "Configuration",
]
