from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship

from app.data.database import Base


class ComboItemModel(Base):
    __tablename__ = "combo_items"

    id = Column(Integer, primary_key=True)
    combo_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #mnoznik na jedna sztuke combo
    quantity = Column(Integer, nullable=False, default=1)

    combo = relationship("ProductModel", foreign_keys=[combo_id], back_populates="combo_items")
    product = relationship("ProductModel", foreign_keys=[product_id])
