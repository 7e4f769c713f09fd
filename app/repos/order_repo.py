from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        # naglowek + pozycje jednym flushem, commit robi wolajacy (transakcja)
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            self._with_details(select(OrderModel)).where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        stmt = self._with_details(select(OrderModel)).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def list_completed_between(self, start: datetime, end: datetime) -> list[OrderModel]:
        stmt = (
            self._with_details(select(OrderModel))
            .where(
                OrderModel.status == "COMPLETED",
                OrderModel.created_at >= start,
                OrderModel.created_at < end,
            )
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    @staticmethod
    def _with_details(stmt):
        return stmt.options(
            selectinload(OrderModel.user),
            selectinload(OrderModel.items).selectinload(OrderItemModel.product),
        )
