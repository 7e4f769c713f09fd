# app/services/stock_ledger.py
from app.data.models.stock_movement import StockMovementModel
from app.repos.stock_movement_repo import StockMovementRepo
from app.services.combo_resolver import Deduction

SALE = "SALE"


def sale_reason(order_id: int, deduction: Deduction) -> str:
    reason = f"Venta #{order_id}"
    if deduction.from_combo:
        reason += f" (Combo {deduction.combo_name})"
    return reason


class StockLedger:
    """Dziennik ruchow magazynowych, jeden wiersz na kazda dekrementacje."""

    def __init__(self, repo: StockMovementRepo):
        self.repo = repo

    def record_sale(self, order_id: int, deduction: Deduction) -> StockMovementModel:
        return self.repo.append(
            StockMovementModel(
                product_id=deduction.product_id,
                quantity=-deduction.quantity,
                type=SALE,
                reason=sale_reason(order_id, deduction),
            )
        )
