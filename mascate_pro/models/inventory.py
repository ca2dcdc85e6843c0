from sqlalchemy import (
    Column, String, Float, Integer, ForeignKey, DateTime, Text, Boolean,
    CheckConstraint, Index,
)
from sqlalchemy.orm import relationship
from mascate_pro.core.database import Base, generate_uuid, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text)
    icon = Column(String(50))
    color = Column(String(20))
    active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36), ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("minimum_stock >= 0", name="ck_products_minimum_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    # unique among active products only; enforced by the catalog service
    name = Column(String(200), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    unit = Column(String(50), nullable=False)
    packaging = Column(String(200))
    purchase_price = Column(Float, nullable=False)
    sale_price = Column(Float, nullable=False)
    current_stock = Column(Integer, nullable=False, default=0)
    minimum_stock = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36), ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))

    movements = relationship(
        "StockMovement",
        back_populates="product",
        order_by="StockMovement.created_at",
    )


class StockMovement(Base):
    __tablename__ = "stock_movements"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
        CheckConstraint("new_stock >= 0", name="ck_movements_new_stock_non_negative"),
        Index("ix_stock_movements_product_created", "product_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    movement_type = Column(String(20), nullable=False, index=True)  # sale, purchase, adjustment, return, loss
    quantity = Column(Integer, nullable=False)
    previous_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)
    unit_price = Column(Float)
    total_value = Column(Float)
    notes = Column(Text)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    product = relationship("Product", back_populates="movements")
