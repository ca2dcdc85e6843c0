from mascate_pro.schemas.auth import LoginRequest, LoginResponse, Token, UserCreate, UserUpdate, UserResponse
from mascate_pro.schemas.inventory import (
    ProductCreate, ProductUpdate, ProductResponse,
    CategoryCreate, CategoryUpdate, CategoryResponse,
    StockMovementCreate, StockMovementResponse,
)
from mascate_pro.schemas.activity_log import ActivityLogCreate, ActivityLogResponse, ActivityLogPage
from mascate_pro.schemas.admin import ConfigurationUpdate, ConfigurationResponse, StockSummary

__all__ = [
    "LoginRequest", "LoginResponse", "Token", "UserCreate", "UserUpdate", "UserResponse",
    "ProductCreate", "ProductUpdate", "ProductResponse",
    "CategoryCreate", "CategoryUpdate", "CategoryResponse",
    "StockMovementCreate", "StockMovementResponse",
    "ActivityLogCreate", "ActivityLogResponse", "ActivityLogPage",
    "ConfigurationUpdate", "ConfigurationResponse", "StockSummary",
]
