from sqlalchemy import func
from sqlalchemy.orm import Session

from mascate_pro.models.inventory import Product
from mascate_pro.services.ledger import movements_today


def stock_summary(db: Session) -> dict:
    """Dashboard totals over active products"""
    active = Product.active == True  # noqa: E712

    total, cost_value, sale_value = (
        db.query(
            func.count(Product.id),
            func.coalesce(func.sum(Product.current_stock * Product.purchase_price), 0.0),
            func.coalesce(func.sum(Product.current_stock * Product.sale_price), 0.0),
        )
        .filter(active)
        .one()
    )
    low_stock = (
        db.query(func.count(Product.id))
        .filter(active, Product.current_stock <= Product.minimum_stock)
        .scalar()
    )
    out_of_stock = (
        db.query(func.count(Product.id))
        .filter(active, Product.current_stock == 0)
        .scalar()
    )

    return {
        "total_products": total,
        "low_stock_count": low_stock,
        "out_of_stock_count": out_of_stock,
        "inventory_cost_value": round(float(cost_value), 2),
        "inventory_sale_value": round(float(sale_value), 2),
        "movements_today": movements_today(db),
    }
