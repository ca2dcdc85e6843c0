from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime

class ConfigurationUpdate(BaseModel):
    value: Dict[str, Any]
    description: Optional[str] = None

class ConfigurationResponse(BaseModel):
    id: str
    key: str
    value: Dict[str, Any]
    description: Optional[str]
    created_by: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StockSummary(BaseModel):
    total_products: int
    low_stock_count: int
    out_of_stock_count: int
    inventory_cost_value: float
    inventory_sale_value: float
    movements_today: int
