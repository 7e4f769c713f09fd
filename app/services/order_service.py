# app/services/order_service.py
from decimal import Decimal
from typing import Iterable

from app.data.database import Database
from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.errors import OrderValidationError, ProductNotFoundError
from app.domain.schemas import OrderItemIn, PaymentIn, PaymentMethod
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.repos.stock_movement_repo import StockMovementRepo
from app.services.combo_resolver import ComboResolver
from app.services.notification_service import NotificationService
from app.services.payment_service import normalize_payment, parse_payment_method, require_cents
from app.services.stock_ledger import StockLedger
from app.services.stock_mutator import StockMutator
from app.utils import settings
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _money(value) -> float | None:
    return float(value) if value is not None else None


def serialize_order(order: OrderModel) -> dict:
    """Decimal -> float dopiero na granicy (odpowiedz API)."""
    return {
        "id": order.id,
        "user_id": order.user_id,
        "waiter_name": order.user.name if order.user is not None else None,
        "status": order.status,
        "total": float(order.total),
        "payment_method": order.payment_method,
        "cash_received": _money(order.cash_received),
        "change_given": _money(order.change_given),
        "cash_amount": _money(order.cash_amount),
        "card_amount": _money(order.card_amount),
        "created_at": order.created_at,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product.name if i.product is not None else None,
                "quantity": i.quantity,
                "price": float(i.price),
            }
            for i in order.items
        ],
    }


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Skladanie zamowienia = jedna transakcja: naglowek + pozycje + zdjecie stanow
    (z rozwinieciem combo) + dziennik ruchow magazynowych.
    """

    def __init__(
        self,
        database: Database,
        notifier: NotificationService | None = None,
        max_wait: float | None = None,
        timeout: float | None = None,
        skip_unknown_products: bool | None = None,
        verify_payments: bool | None = None,
    ):
        self.database = database
        self.notifier = notifier or NotificationService()
        self.max_wait = settings.TX_MAX_WAIT_SECONDS if max_wait is None else max_wait
        self.timeout = settings.TX_TIMEOUT_SECONDS if timeout is None else timeout
        self.skip_unknown_products = (
            settings.SKIP_UNKNOWN_PRODUCTS if skip_unknown_products is None else skip_unknown_products
        )
        self.verify_payments = (
            settings.VERIFY_PAYMENT_AMOUNTS if verify_payments is None else verify_payments
        )

    def place_order(
        self,
        user_id: int,
        payment_method: PaymentMethod | str,
        items: Iterable[OrderItemIn],
        payment: PaymentIn | None = None,
    ) -> dict:
        """
        Use Case: Sprzedaz (Command).

        1. Walidacja wejscia (przed jakimkolwiek zapisem)
        2. Total = suma(cena * ilosc) z cen podanych przez klienta
        3. Zapis naglowka + pozycji
        4. Dla kazdej pozycji: combo resolver -> zdjecie stanu -> wpis w dzienniku
        5. Commit albo rollback calosci
        6. Sygnaly "orders" / "inventory"

        Nie jest idempotentne: ponowne wywolanie tworzy drugie zamowienie.
        """
        items = list(items)
        if not items:
            raise OrderValidationError("Zamowienie musi zawierac co najmniej jedna pozycje")
        for item in items:
            if item.quantity < 1:
                raise OrderValidationError(f"Ilosc dla produktu {item.product_id} musi byc >= 1")
            if item.price < 0:
                raise OrderValidationError(f"Cena dla produktu {item.product_id} nie moze byc ujemna")
        # ceny do groszy, zeby total == suma zapisanych pozycji
        items = [
            item.model_copy(update={"price": require_cents(item.price, f"Cena produktu {item.product_id}")})
            for item in items
        ]

        method = parse_payment_method(payment_method)
        total = sum((Decimal(item.price) * item.quantity for item in items), Decimal("0.00"))
        payment_fields = normalize_payment(method, payment, total, verify=self.verify_payments)

        with self.database.transaction(max_wait=self.max_wait, timeout=self.timeout) as (db, deadline):
            order_repo = OrderRepo(db)
            product_repo = ProductRepo(db)
            resolver = ComboResolver(product_repo)
            mutator = StockMutator(product_repo)
            ledger = StockLedger(StockMovementRepo(db))

            order = order_repo.create_order(
                OrderModel(
                    user_id=user_id,
                    status="COMPLETED",
                    total=total,
                    payment_method=method.value,
                    items=[
                        OrderItemModel(
                            product_id=item.product_id,
                            quantity=item.quantity,
                            price=item.price,
                        )
                        for item in items
                    ],
                    **payment_fields,
                )
            )
            deadline.check("order insert")

            for item in items:
                try:
                    deductions = resolver.resolve(item.product_id, item.quantity)
                except ProductNotFoundError:
                    if not self.skip_unknown_products:
                        raise
                    logger.warning(
                        f"Order {order.id}: product {item.product_id} not found, line skipped"
                    )
                    continue
                deadline.check(f"resolve product {item.product_id}")

                for deduction in deductions:
                    mutator.deduct(deduction.product_id, deduction.quantity)
                    ledger.record_sale(order.id, deduction)
                    deadline.check(f"deduct product {deduction.product_id}")

            order = order_repo.get_order(order.id)
            result = serialize_order(order)

        logger.info(
            f"Order {result['id']} placed by user {user_id}: "
            f"{len(items)} lines, total {total}, payment {method.value}"
        )

        self.notifier.orders_changed()
        self.notifier.inventory_changed()

        return result

    def get_order(self, order_id: int) -> dict:
        with self.database.session() as db:
            order = OrderRepo(db).get_order(order_id)
            if not order:
                raise ValueError("Zamówienie nie istnieje")
            return serialize_order(order)

    def list_orders(self) -> list[dict]:
        with self.database.session() as db:
            return [serialize_order(o) for o in OrderRepo(db).list_orders()]

    def list_orders_for_user(self, user_id: int) -> list[dict]:
        with self.database.session() as db:
            return [serialize_order(o) for o in OrderRepo(db).list_orders(user_id=user_id)]
