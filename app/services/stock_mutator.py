# app/services/stock_mutator.py
from app.domain.errors import ProductNotFoundError
from app.repos.product_repo import ProductRepo, StockLevel
from app.utils.logging import get_logger

logger = get_logger(__name__)


class StockMutator:
    """
    Zdejmuje stan produktu i wylacza go gdy stan <= 0.
    Combo nigdy nie jest wylaczane tą regula (nominalny stock = 0).
    Oversell jest tolerowany: brak dolnej granicy.
    """

    def __init__(self, repo: ProductRepo):
        self.repo = repo

    def deduct(self, product_id: int, quantity: int) -> StockLevel:
        level = self.repo.decrement_stock(product_id, quantity)
        if level is None:
            raise ProductNotFoundError(product_id)

        if not level.is_combo and level.stock <= 0 and level.is_active:
            self.repo.deactivate(product_id)
            logger.info(f"Product {product_id} deactivated, stock reached {level.stock}")
            level = StockLevel(
                product_id=level.product_id,
                stock=level.stock,
                is_combo=level.is_combo,
                is_active=False,
            )

        return level
