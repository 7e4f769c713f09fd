"""Tests for catalog management and combo composition rules."""

from decimal import Decimal

import pytest

from app.data.models import ComboItemModel, ProductModel, StockMovementModel
from app.domain.errors import ComboCompositionError, ProductNotFoundError
from app.domain.schemas import CategoryCreate, ComboItemIn, ProductCreate, ProductUpdate
from app.services.product_service import ProductService


@pytest.fixture
def service(db, notifier):
    return ProductService(db, notifier=notifier)


def test_create_regular_product(service, category, notifier):
    product = service.create_product(
        ProductCreate(name="Limonada", price=Decimal("3.50"), stock=12, category_id=category.id)
    )

    assert product["stock"] == 12
    assert product["min_stock"] == 5
    assert product["price"] == 3.5
    assert product["category_name"] == "Comida"
    assert product["combo_items"] == []
    notifier.inventory_changed.assert_called_once_with()


def test_create_combo_forces_zero_stock(service, category, make_product):
    burger = make_product("Hamburguesa", stock=8)
    fries = make_product("Papas", stock=9)

    combo = service.create_product(
        ProductCreate(
            name="Combo Burger",
            price=Decimal("12.00"),
            stock=50,
            category_id=category.id,
            is_combo=True,
            combo_items=[ComboItemIn(product_id=burger.id, quantity=1), ComboItemIn(product_id=fries.id, quantity=2)],
        )
    )

    assert combo["stock"] == 0
    assert [(c["product_id"], c["quantity"]) for c in combo["combo_items"]] == [(burger.id, 1), (fries.id, 2)]


def test_combo_of_combos_is_rejected(service, category, make_product):
    burger = make_product("Hamburguesa")
    inner = make_product("Combo Burger", is_combo=True, components=[(burger, 1)])

    with pytest.raises(ComboCompositionError):
        service.create_product(
            ProductCreate(
                name="Combo Doble",
                price=Decimal("20.00"),
                category_id=category.id,
                is_combo=True,
                combo_items=[ComboItemIn(product_id=inner.id, quantity=2)],
            )
        )


def test_combo_with_missing_component_is_rejected(service, category):
    with pytest.raises(ComboCompositionError):
        service.create_product(
            ProductCreate(
                name="Combo Fantasma",
                price=Decimal("9.00"),
                category_id=category.id,
                is_combo=True,
                combo_items=[ComboItemIn(product_id=4242, quantity=1)],
            )
        )


def test_create_product_with_unknown_category(service):
    with pytest.raises(ValueError):
        service.create_product(ProductCreate(name="X", price=Decimal("1.00"), category_id=77))


def test_update_replaces_combo_composition(service, make_product):
    burger = make_product("Hamburguesa")
    fries = make_product("Papas")
    soda = make_product("Gaseosa")
    combo = make_product("Combo", is_combo=True, components=[(burger, 1), (fries, 1)])

    updated = service.update_product(
        combo.id,
        ProductUpdate(price=Decimal("14.00"), combo_items=[ComboItemIn(product_id=soda.id, quantity=2)]),
    )

    assert updated["price"] == 14.0
    assert [(c["product_id"], c["quantity"]) for c in updated["combo_items"]] == [(soda.id, 2)]


def test_update_rejects_combo_containing_itself(service, make_product):
    combo = make_product("Combo", is_combo=True)

    with pytest.raises(ComboCompositionError):
        service.update_product(combo.id, ProductUpdate(combo_items=[ComboItemIn(product_id=combo.id)]))


def test_component_cannot_become_combo(service, make_product):
    burger = make_product("Hamburguesa")
    make_product("Combo", is_combo=True, components=[(burger, 1)])

    with pytest.raises(ComboCompositionError):
        service.update_product(burger.id, ProductUpdate(is_combo=True))


def test_update_missing_product(service):
    with pytest.raises(ProductNotFoundError):
        service.update_product(5150, ProductUpdate(name="Nada"))


def test_restock_reactivation(service, make_product):
    beer = make_product("Cerveza", stock=0, is_active=False)

    updated = service.update_product(beer.id, ProductUpdate(stock=24, is_active=True))

    assert (updated["stock"], updated["is_active"]) == (24, True)


def test_catalog_derives_combo_stock(service, make_product):
    """Effective stock = min(floor(component stock / multiplier))."""
    wings = make_product("Alitas", stock=10)
    soda = make_product("Gaseosa", stock=7)
    make_product("Inactivo", stock=3, is_active=False)
    make_product("Combo Alitas", is_combo=True, components=[(wings, 3), (soda, 1)])

    catalog = {p["name"]: p for p in service.get_catalog()}

    assert set(catalog) == {"Alitas", "Gaseosa", "Combo Alitas"}
    assert catalog["Combo Alitas"]["stock"] == 3
    assert catalog["Alitas"]["stock"] == 10


def test_catalog_combo_with_oversold_component(service, make_product):
    wings = make_product("Alitas", stock=-2)
    make_product("Combo Alitas", is_combo=True, components=[(wings, 1)])

    catalog = {p["name"]: p for p in service.get_catalog()}

    assert catalog["Combo Alitas"]["stock"] == 0


def test_low_stock_excludes_combos(service, make_product):
    make_product("Cerveza", stock=2, min_stock=5)
    make_product("Vino", stock=5, min_stock=5)
    make_product("Agua", stock=30, min_stock=5)
    make_product("Combo", is_combo=True)

    assert sorted(p["name"] for p in service.low_stock()) == ["Cerveza", "Vino"]


def test_create_category_is_idempotent_by_name(service):
    first = service.create_category(CategoryCreate(name="Postres"))
    second = service.create_category(CategoryCreate(name="Postres"))

    assert first.id == second.id
    assert [c.name for c in service.list_categories()] == ["Postres"]


def test_delete_product_without_history(db, service, notifier, make_product):
    a = make_product("Alitas")
    combo = make_product("Combo Alitas", is_combo=True, components=[(a, 2)])
    notifier.reset_mock()

    assert service.delete_product(combo.id) == {"id": combo.id, "deleted": True, "is_active": False}

    db.expire_all()
    assert db.get(ProductModel, combo.id) is None
    assert db.query(ComboItemModel).count() == 0
    assert db.get(ProductModel, a.id) is not None
    notifier.inventory_changed.assert_called_once_with()


def test_delete_product_with_sales_history_deactivates(db, service, make_product):
    coffee = make_product("Cafe")
    db.add(StockMovementModel(product_id=coffee.id, quantity=-1, reason="Venta #1"))
    db.commit()

    result = service.delete_product(coffee.id)

    assert result == {"id": coffee.id, "deleted": False, "is_active": False}
    db.expire_all()
    assert db.get(ProductModel, coffee.id).is_active is False
    assert db.query(StockMovementModel).count() == 1


def test_delete_combo_component_deactivates(db, service, make_product):
    a = make_product("Alitas")
    make_product("Combo Alitas", is_combo=True, components=[(a, 2)])

    assert service.delete_product(a.id)["deleted"] is False
    db.expire_all()
    assert db.query(ComboItemModel).count() == 1


def test_delete_missing_product(service):
    with pytest.raises(ProductNotFoundError):
        service.delete_product(5150)
