import pytest

from mascate_pro.core.exceptions import (
    CategoryInUseError, DuplicateNameError, NotFoundError, ValidationError,
)
from mascate_pro.models.activity_log import ActivityLog
from mascate_pro.models.inventory import Product, StockMovement
from mascate_pro.services import catalog, ledger


def test_create_product_round_trips_fields(db, admin_actor, product_data):
    product = catalog.create_product(db, product_data, admin_actor)

    fetched = catalog.get_product(db, product.id)
    assert fetched.name == "Seda"
    assert fetched.category == "Sedas"
    assert fetched.purchase_price == 1.80
    assert fetched.sale_price == 2.50
    assert fetched.current_stock == 0
    assert fetched.minimum_stock == 20
    assert fetched.active is True
    assert fetched.created_by == admin_actor.id


def test_create_product_logs_activity(db, admin_actor, product_data):
    catalog.create_product(db, product_data, admin_actor)

    entry = db.query(ActivityLog).filter(ActivityLog.action == "PRODUCT_CREATED").one()
    assert entry.user_id == admin_actor.id
    assert "Seda" in entry.details
    assert entry.ip_address == "127.0.0.1"


def test_opening_stock_is_recorded_as_adjustment(db, admin_actor, product_data):
    product = catalog.create_product(db, dict(product_data, current_stock=12), admin_actor)

    movement = db.query(StockMovement).filter(StockMovement.product_id == product.id).one()
    assert movement.movement_type == "adjustment"
    assert (movement.previous_stock, movement.new_stock, movement.quantity) == (0, 12, 12)
    assert ledger.verify_ledger(db, product.id)["consistent"]


def test_zero_opening_stock_records_no_movement(db, admin_actor, product_data):
    product = catalog.create_product(db, product_data, admin_actor)
    assert db.query(StockMovement).filter(StockMovement.product_id == product.id).count() == 0


@pytest.mark.parametrize("field,value", [
    ("name", ""),
    ("name", "   "),
    ("category", None),
    ("purchase_price", 0),
    ("sale_price", -1),
    ("current_stock", -5),
    ("minimum_stock", 1.5),
])
def test_create_product_rejects_invalid_fields(db, admin_actor, product_data, field, value):
    with pytest.raises(ValidationError):
        catalog.create_product(db, dict(product_data, **{field: value}), admin_actor)
    assert db.query(Product).count() == 0


def test_duplicate_product_name_is_rejected(db, admin_actor, product_data):
    first = catalog.create_product(db, dict(product_data, name="Bala"), admin_actor)

    with pytest.raises(DuplicateNameError):
        catalog.create_product(db, dict(product_data, name="bala "), admin_actor)

    assert db.query(Product).count() == 1
    assert catalog.get_product(db, first.id).name == "Bala"


def test_name_of_deactivated_product_can_be_reused(db, admin_actor, product_data):
    old = catalog.create_product(db, dict(product_data, name="Bala", current_stock=3), admin_actor)
    assert catalog.delete_product(db, old.id, admin_actor) == "soft"

    new = catalog.create_product(db, dict(product_data, name="Bala"), admin_actor)
    assert new.id != old.id


def test_update_product_changes_whitelisted_fields_only(db, admin_actor, product_data):
    product = catalog.create_product(db, product_data, admin_actor)

    updated = catalog.update_product(
        db, product.id,
        {"sale_price": 3.0, "minimum_stock": 5, "current_stock": 999, "created_by": "x"},
        admin_actor,
    )
    assert updated.sale_price == 3.0
    assert updated.minimum_stock == 5
    assert updated.current_stock == 0
    assert updated.created_by == admin_actor.id
    assert updated.updated_at is not None


def test_update_product_rejects_duplicate_name(db, admin_actor, product_data):
    catalog.create_product(db, dict(product_data, name="Bala"), admin_actor)
    other = catalog.create_product(db, dict(product_data, name="Chiclete"), admin_actor)

    with pytest.raises(DuplicateNameError):
        catalog.update_product(db, other.id, {"name": "BALA"}, admin_actor)
    assert catalog.get_product(db, other.id).name == "Chiclete"


def test_update_missing_product(db, admin_actor):
    with pytest.raises(NotFoundError):
        catalog.update_product(db, "missing", {"name": "x"}, admin_actor)


def test_delete_without_movements_is_hard(db, admin_actor, product_data):
    product = catalog.create_product(db, product_data, admin_actor)
    product_id = product.id

    assert catalog.delete_product(db, product_id, admin_actor) == "hard"
    with pytest.raises(NotFoundError):
        catalog.get_product(db, product_id)
    assert db.query(ActivityLog).filter(ActivityLog.action == "PRODUCT_DELETED").count() == 1


def test_delete_with_movements_is_soft(db, admin_actor, product_data):
    product = catalog.create_product(db, product_data, admin_actor)
    ledger.apply_movement(db, product.id, "purchase", admin_actor, quantity=10)

    assert catalog.delete_product(db, product.id, admin_actor) == "soft"
    fetched = catalog.get_product(db, product.id)
    assert fetched.active is False
    assert fetched not in catalog.list_active_products(db)


def test_list_active_products_filters(db, admin_actor, product_data):
    catalog.create_product(db, dict(product_data, name="Seda Zomo", category="Sedas"), admin_actor)
    catalog.create_product(db, dict(product_data, name="Isqueiro", category="Acessórios", minimum_stock=0), admin_actor)

    assert [p.name for p in catalog.list_active_products(db)] == ["Isqueiro", "Seda Zomo"]
    assert [p.name for p in catalog.list_active_products(db, category="seda")] == ["Seda Zomo"]
    assert [p.name for p in catalog.list_active_products(db, search="zomo")] == ["Seda Zomo"]
    assert [p.name for p in catalog.list_active_products(db, low_stock=True)] == ["Isqueiro", "Seda Zomo"]


def test_low_stock_reflects_stored_state(db, admin_actor, product_data):
    product = catalog.create_product(db, dict(product_data, current_stock=25), admin_actor)
    assert catalog.get_low_stock(db) == []

    ledger.apply_movement(db, product.id, "sale", admin_actor, quantity=5)
    assert [p.id for p in catalog.get_low_stock(db)] == [product.id]


def test_category_lifecycle(db, admin_actor, product_data):
    category = catalog.create_category(db, {"name": "Bebidas", "color": "#ff0000"}, admin_actor)
    assert [c.name for c in catalog.list_categories(db)] == ["Bebidas"]

    with pytest.raises(DuplicateNameError):
        catalog.create_category(db, {"name": "bebidas"}, admin_actor)

    renamed = catalog.update_category(db, category.id, {"name": "Drinks", "active": False}, admin_actor)
    assert renamed.name == "Drinks"
    assert catalog.list_categories(db) == []
    assert len(catalog.list_categories(db, include_inactive=True)) == 1

    catalog.delete_category(db, category.id, admin_actor)
    with pytest.raises(NotFoundError):
        catalog.get_category(db, category.id)

    actions = [a for (a,) in db.query(ActivityLog.action).order_by(ActivityLog.created_at)]
    assert actions == ["CATEGORY_CREATED", "CATEGORY_UPDATED", "CATEGORY_DELETED"]


def test_category_in_use_cannot_be_deleted(db, admin_actor, product_data):
    category = catalog.create_category(db, {"name": "Sedas"}, admin_actor)
    catalog.create_product(db, product_data, admin_actor)

    with pytest.raises(CategoryInUseError):
        catalog.delete_category(db, category.id, admin_actor)
    assert catalog.get_category(db, category.id)
