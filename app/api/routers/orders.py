# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_notifier
from app.data.database import Database, get_database
from app.domain.errors import OrderValidationError, ProductNotFoundError, TransactionTimeoutError
from app.domain.schemas import OrderCreate, OrderOut
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

RETRY_MESSAGE = "Nie udalo sie zapisac zamowienia, sprobuj ponownie"


def get_service(database: Database, notifier: NotificationService):
    return OrderService(database, notifier=notifier)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    database: Database = Depends(get_database),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Sprzedaz: zapisuje zamowienie i zdejmuje stany w jednej transakcji.
    Bledy wewnetrzne nie sa pokazywane klientowi, tylko prosba o ponowienie.
    """
    svc = get_service(database, notifier)
    try:
        return svc.place_order(
            user_id=payload.user_id,
            payment_method=payload.payment_method,
            items=payload.items,
            payment=payload.payment,
        )
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransactionTimeoutError:
        logger.exception("Order transaction timed out")
        raise HTTPException(status_code=503, detail=RETRY_MESSAGE)
    except (ProductNotFoundError, SQLAlchemyError):
        logger.exception("Order transaction rolled back")
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int | None = Query(None),
    database: Database = Depends(get_database),
    notifier: NotificationService = Depends(get_notifier),
):
    svc = get_service(database, notifier)
    if user_id is not None:
        return svc.list_orders_for_user(user_id)
    return svc.list_orders()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    database: Database = Depends(get_database),
    notifier: NotificationService = Depends(get_notifier),
):
    svc = get_service(database, notifier)
    try:
        return svc.get_order(order_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
