from sqlalchemy.orm import Session

from app.data.models.stock_movement import StockMovementModel


class StockMovementRepo:
    """Tylko zapis (append)."""

    def __init__(self, db: Session):
        self.db = db

    def append(self, movement: StockMovementModel) -> StockMovementModel:
        self.db.add(movement)
        self.db.flush()
        return movement
