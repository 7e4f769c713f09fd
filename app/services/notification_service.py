# app/services/notification_service.py
from kombu.exceptions import OperationalError

from app.celery_worker import celery_app
from app.services.view_cache import ViewCache, ORDERS_VIEW, INVENTORY_VIEW
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Sygnaly "zmienily sie zamowienia" / "zmienil sie magazyn".
    Samo uniewaznienie widokow robi Celery (asynchronicznie).
    """

    def orders_changed(self):
        self._publish(ORDERS_VIEW)

    def inventory_changed(self):
        self._publish(INVENTORY_VIEW)

    @staticmethod
    def _publish(view: str):
        # zamowienie jest juz zacommitowane, brak brokera nie moze go cofnac
        try:
            invalidate_view_task.delay(view)
        except OperationalError as e:
            logger.warning(f"Could not publish invalidation of view {view}: {e}")


@celery_app.task(name="app.services.notification_service.invalidate_view_task")
def invalidate_view_task(view: str):
    """
    Celery task - usuwa z redis wszystkie klucze danego widoku.
    """
    removed = ViewCache().invalidate(view)
    return {"view": view, "removed": removed}
