#app/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, DateTime, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)

    #combo zawsze ma stock 0, realna dostepnosc liczona z komponentow
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=5)
    is_active = Column(Boolean, nullable=False, default=True)
    is_combo = Column(Boolean, nullable=False, default=False)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    category = relationship("CategoryModel", back_populates="products")
    combo_items = relationship(
        "ComboItemModel",
        foreign_keys="ComboItemModel.combo_id",
        back_populates="combo",
        cascade="all, delete-orphan",
        order_by="ComboItemModel.id",
    )
