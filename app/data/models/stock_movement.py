from sqlalchemy import Column, Integer, ForeignKey, String, DateTime
from datetime import datetime, timezone

from app.data.database import Base


class StockMovementModel(Base):
    """Append-only, nigdy nie aktualizowany ani usuwany."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)  # ze znakiem, sprzedaz < 0
    type = Column(String, nullable=False, default="SALE")
    reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
