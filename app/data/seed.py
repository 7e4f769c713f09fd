# app/data/seed.py
from decimal import Decimal

from app.data.database import Database
from app.data.models import CategoryModel, ComboItemModel, ProductModel, UserModel
from app.utils.logging import get_logger

logger = get_logger(__name__)


def seed(database: Database | None = None):
    database = database or Database()
    database.create_all()

    db = database.session()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            logger.info("Database already seeded")
            return

        db.add_all([
            UserModel(name="Administrador", email="admin@erp.com", role="ADMIN"),
            UserModel(name="Luis", email="luis@erp.com", role="WAITER"),
            UserModel(name="Camila", email="camila@erp.com", role="WAITER"),
        ])

        drinks = CategoryModel(name="Bebidas")
        food = CategoryModel(name="Comida")
        db.add_all([drinks, food])
        db.flush()

        burger = ProductModel(name="Hamburguesa", price=Decimal("18.00"), stock=40, category_id=food.id)
        fries = ProductModel(name="Papas fritas", price=Decimal("6.50"), stock=60, category_id=food.id)
        soda = ProductModel(name="Gaseosa", price=Decimal("4.00"), stock=100, category_id=drinks.id)
        db.add_all([burger, fries, soda])
        db.flush()

        combo = ProductModel(
            name="Combo Hamburguesa",
            price=Decimal("25.00"),
            stock=0,
            is_combo=True,
            category_id=food.id,
            combo_items=[
                ComboItemModel(product_id=burger.id, quantity=1),
                ComboItemModel(product_id=fries.id, quantity=1),
                ComboItemModel(product_id=soda.id, quantity=1),
            ],
        )
        db.add(combo)
        db.commit()
        logger.info("Database seeded")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
