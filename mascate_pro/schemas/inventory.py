from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, Optional, Literal
from datetime import datetime

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Label = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Price = Annotated[float, Field(gt=0, le=999999.99)]
StockCount = Annotated[int, Field(ge=0, le=999999)]

MovementType = Literal["sale", "purchase", "adjustment", "return", "loss"]

# Categories
class CategoryCreate(BaseModel):
    name: Label
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=20)

class CategoryUpdate(BaseModel):
    name: Optional[Label] = None
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=20)
    active: Optional[bool] = None

class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    icon: Optional[str]
    color: Optional[str]
    active: bool
    created_by: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Products
class ProductCreate(BaseModel):
    name: Name
    category: Label
    unit: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
    packaging: Optional[str] = Field(default=None, max_length=200)
    purchase_price: Price
    sale_price: Price
    current_stock: StockCount = 0
    minimum_stock: StockCount = 0

class ProductUpdate(BaseModel):
    """Editable product fields; stock only changes through stock movements"""
    name: Optional[Name] = None
    category: Optional[Label] = None
    unit: Optional[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]] = None
    packaging: Optional[str] = Field(default=None, max_length=200)
    purchase_price: Optional[Price] = None
    sale_price: Optional[Price] = None
    minimum_stock: Optional[StockCount] = None
    active: Optional[bool] = None

class ProductResponse(BaseModel):
    id: str
    name: str
    category: str
    unit: str
    packaging: Optional[str]
    purchase_price: float
    sale_price: float
    current_stock: int
    minimum_stock: int
    active: bool
    created_by: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None
    low_stock: bool = False

    class Config:
        from_attributes = True

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        data = cls.model_validate(product)
        data.low_stock = product.current_stock <= product.minimum_stock
        return data

class ProductDeleteResponse(BaseModel):
    message: str
    product_id: str
    mode: Literal["soft", "hard"]

# Stock movements
class StockMovementCreate(BaseModel):
    product_id: str
    movement_type: MovementType
    quantity: Optional[int] = Field(default=None, le=999999)
    # adjustment only: the physically counted stock
    new_stock: Optional[StockCount] = None
    # optional guard: the stock the client saw when it built the request
    previous_stock: Optional[int] = None
    unit_price: Optional[Price] = None
    notes: Optional[str] = Field(default=None, max_length=500)

class StockMovementResponse(BaseModel):
    id: str
    product_id: str
    movement_type: str
    quantity: int
    previous_stock: int
    new_stock: int
    unit_price: Optional[float]
    total_value: Optional[float]
    notes: Optional[str]
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True

class MovementResult(BaseModel):
    product: ProductResponse
    movement: StockMovementResponse

class LedgerReport(BaseModel):
    product_id: str
    current_stock: int
    ledger_stock: int
    movement_count: int
    consistent: bool
    broken_links: int
