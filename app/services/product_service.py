# app/services/product_service.py
from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.domain.errors import ComboCompositionError, ProductNotFoundError
from app.domain.schemas import CategoryCreate, ComboItemIn, ProductCreate, ProductUpdate
from app.repos.product_repo import ProductRepo
from app.services.notification_service import NotificationService
from app.utils.logging import get_logger

logger = get_logger(__name__)


def effective_stock(product: ProductModel) -> int:
    """
    Dla combo: ile sztuk da sie sprzedac z aktualnych stanow komponentow
    (min z floor(stock komponentu / mnoznik)). Liczone przy wyswietlaniu, nie w transakcji.
    """
    if not (product.is_combo and product.combo_items):
        return product.stock
    return min(max(item.product.stock, 0) // item.quantity for item in product.combo_items)


def serialize_product(product: ProductModel, stock: int | None = None) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": float(product.price),
        "stock": product.stock if stock is None else stock,
        "min_stock": product.min_stock,
        "is_active": product.is_active,
        "is_combo": product.is_combo,
        "category_id": product.category_id,
        "category_name": product.category.name if product.category is not None else None,
        "combo_items": [
            {
                "product_id": item.product_id,
                "product_name": item.product.name,
                "quantity": item.quantity,
                "component_stock": item.product.stock,
            }
            for item in product.combo_items
        ],
    }


class ProductService:
    """
    Zarzadzanie katalogiem: produkty, sklad combo, kategorie.
    Kazda zmiana wysyla sygnal "inventory".
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.repo = ProductRepo(db)
        self.notifier = notifier or NotificationService()

    #query
    def list_products(self, active_only: bool = False) -> list[dict]:
        return [serialize_product(p) for p in self.repo.list_products(active_only=active_only)]

    def get_catalog(self) -> list[dict]:
        """Aktywne produkty dla kelnera, combo z wyliczonym stanem."""
        return [
            serialize_product(p, stock=effective_stock(p))
            for p in self.repo.list_products(active_only=True)
        ]

    def low_stock(self) -> list[dict]:
        return [
            serialize_product(p)
            for p in self.repo.list_products()
            if not p.is_combo and p.stock <= p.min_stock
        ]

    def get_product(self, product_id: int) -> dict:
        product = self.repo.get_with_components(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return serialize_product(product)

    #commands
    def create_product(self, data: ProductCreate) -> dict:
        if not self.repo.get_category(data.category_id):
            raise ValueError(f"Kategoria {data.category_id} nie istnieje")

        components = self._validate_components(None, data.combo_items or []) if data.is_combo else []

        try:
            product = self.repo.add_product(
                ProductModel(
                    name=data.name,
                    description=data.description,
                    price=data.price,
                    #combo ma zawsze stock 0, realny liczony z komponentow
                    stock=0 if data.is_combo else data.stock,
                    min_stock=data.min_stock,
                    category_id=data.category_id,
                    is_active=data.is_active,
                    is_combo=data.is_combo,
                )
            )
            if components:
                self.repo.replace_combo_items(product, components)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product.id} created (combo={product.is_combo})")
        self.notifier.inventory_changed()
        return self.get_product(product.id)

    def update_product(self, product_id: int, data: ProductUpdate) -> dict:
        product = self.repo.get_with_components(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        changes = data.model_dump(exclude_unset=True, exclude={"combo_items"})

        if changes.get("is_combo") and not product.is_combo and self.repo.is_used_as_component(product_id):
            raise ComboCompositionError(
                f"Produkt {product_id} jest skladnikiem innego combo i nie moze zostac combo"
            )
        if "category_id" in changes and not self.repo.get_category(changes["category_id"]):
            raise ValueError(f"Kategoria {changes['category_id']} nie istnieje")

        is_combo = changes.get("is_combo", product.is_combo)
        components = None
        if is_combo and data.combo_items is not None:
            components = self._validate_components(product_id, data.combo_items)

        try:
            for field, value in changes.items():
                setattr(product, field, value)
            if is_combo:
                product.stock = 0
            if components is not None:
                self.repo.replace_combo_items(product, components)
            elif not is_combo and product.combo_items:
                # produkt przestal byc combo -> nie moze miec komponentow
                self.repo.replace_combo_items(product, [])
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        self.notifier.inventory_changed()
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> dict:
        """
        Usuwa produkt bez historii. Produkt ze sprzedaza, ruchami magazynowymi
        albo bedacy skladnikiem combo jest tylko dezaktywowany (FK z order_items,
        stock_movements, combo_items).
        """
        product = self.repo.get_with_components(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        referenced = self.repo.has_history(product_id) or self.repo.is_used_as_component(product_id)
        try:
            if referenced:
                product.is_active = False
            else:
                self.repo.delete_product(product)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product_id} {'deactivated' if referenced else 'deleted'}")
        self.notifier.inventory_changed()
        return {"id": product_id, "deleted": not referenced, "is_active": False}

    def list_categories(self) -> list[CategoryModel]:
        return self.repo.list_categories()

    def create_category(self, data: CategoryCreate) -> CategoryModel:
        existing = self.repo.get_category_by_name(data.name)
        if existing:
            return existing
        category = self.repo.add_category(CategoryModel(name=data.name))
        self.repo.commit()
        return category

    def _validate_components(self, combo_id: int | None, items: list[ComboItemIn]) -> list[tuple[int, int]]:
        """
        Combo tylko jednopoziomowe:
        - komponent musi istniec
        - komponent nie moze byc combo ani samym combo
        - mnoznik >= 1
        """
        found = self.repo.get_many([i.product_id for i in items])
        components = []
        for item in items:
            if combo_id is not None and item.product_id == combo_id:
                raise ComboCompositionError("Combo nie moze zawierac samego siebie")
            component = found.get(item.product_id)
            if component is None:
                raise ComboCompositionError(f"Komponent {item.product_id} nie istnieje")
            if component.is_combo:
                raise ComboCompositionError(
                    f"Komponent {item.product_id} jest combo, combo w combo nie jest obslugiwane"
                )
            if item.quantity < 1:
                raise ComboCompositionError(f"Mnoznik komponentu {item.product_id} musi byc >= 1")
            components.append((item.product_id, item.quantity))
        return components
