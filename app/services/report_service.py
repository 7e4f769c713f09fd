# app/services/report_service.py
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy.orm import Session

from app.repos.order_repo import OrderRepo
from app.services.order_service import serialize_order
from app.services.payment_service import aggregate_payments
from app.utils.logging import get_logger

logger = get_logger(__name__)


def day_range(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Od poczatku start_date do konca end_date (UTC), koniec wylaczny."""
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return start, end


class ReportService:
    """Historia sprzedazy (Query), tylko zamowienia COMPLETED."""

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def get_sales_history(self, start_date: date, end_date: date) -> dict:
        if end_date < start_date:
            raise ValueError("Data koncowa nie moze byc wczesniejsza niz poczatkowa")

        start, end = day_range(start_date, end_date)
        orders = self.repo.list_completed_between(start, end)
        totals = aggregate_payments(orders)

        logger.info(
            f"Sales history {start_date}..{end_date}: {totals.count} orders, total {totals.total}"
        )

        return {
            "orders": [serialize_order(o) for o in orders],
            "summary": totals.as_dict(),
        }
