# app/repos/product_repo.py
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.category import CategoryModel
from app.data.models.combo_item import ComboItemModel
from app.data.models.order_item import OrderItemModel
from app.data.models.product import ProductModel
from app.data.models.stock_movement import StockMovementModel


@dataclass(frozen=True)
class StockLevel:
    """Stan produktu po dekrementacji (bez ponownego odczytu)."""

    product_id: int
    stock: int
    is_combo: bool
    is_active: bool


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_with_components(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .options(selectinload(ProductModel.combo_items))
        ).scalar_one_or_none()

    def get_many(self, product_ids: list[int]) -> dict[int, ProductModel]:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(product_ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_products(self, active_only: bool = False) -> list[ProductModel]:
        stmt = (
            select(ProductModel)
            .options(
                selectinload(ProductModel.category),
                selectinload(ProductModel.combo_items).selectinload(ComboItemModel.product),
            )
            .order_by(ProductModel.name)
        )
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def is_used_as_component(self, product_id: int) -> bool:
        return self.db.execute(
            select(ComboItemModel.id).where(ComboItemModel.product_id == product_id).limit(1)
        ).first() is not None

    def has_history(self, product_id: int) -> bool:
        """Produkt wystepuje w sprzedazy lub w ruchach magazynowych."""
        for model in (OrderItemModel, StockMovementModel):
            found = self.db.execute(
                select(model.id).where(model.product_id == product_id).limit(1)
            ).first()
            if found is not None:
                return True
        return False

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def replace_combo_items(self, combo: ProductModel, items: list[tuple[int, int]]) -> None:
        # sklad combo podmieniany w calosci, stare wiersze usuwa delete-orphan
        combo.combo_items = [
            ComboItemModel(product_id=product_id, quantity=quantity)
            for product_id, quantity in items
        ]
        self.db.flush()

    def decrement_stock(self, product_id: int, quantity: int) -> StockLevel | None:
        """
        Atomowe UPDATE stock = stock - q ... RETURNING.
        Bez dolnej granicy (stock moze zejsc ponizej zera).
        """
        row = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock - quantity)
            .returning(ProductModel.id, ProductModel.stock, ProductModel.is_combo, ProductModel.is_active)
        ).one_or_none()

        if row is None:
            return None
        return StockLevel(product_id=row[0], stock=row[1], is_combo=row[2], is_active=row[3])

    def deactivate(self, product_id: int) -> None:
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(is_active=False)
        )

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.flush()

    # kategorie
    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars().all())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
