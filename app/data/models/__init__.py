#import wszystkich modeliz zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.user import UserModel
from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.combo_item import ComboItemModel
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.stock_movement import StockMovementModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "ComboItemModel",
    "OrderModel",
    "OrderItemModel",
    "StockMovementModel",
]
