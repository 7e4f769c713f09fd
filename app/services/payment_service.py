# app/services/payment_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from app.domain.errors import OrderValidationError
from app.domain.schemas import PaymentIn, PaymentMethod
from app.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def require_cents(value, label: str) -> Decimal | None:
    """Kwota musi miescic sie w Numeric(10,2), inaczej suma zamowienia rozjedzie sie z pozycjami."""
    if value is None:
        return None
    value = Decimal(value)
    if value != value.quantize(CENT):
        raise OrderValidationError(f"{label}: kwota {value} ma wiecej niz 2 miejsca po przecinku")
    return value.quantize(CENT)


def parse_payment_method(value) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        raise OrderValidationError(f"Nieznana metoda platnosci: {value!r}") from None


def normalize_payment(
    method: PaymentMethod,
    payment: PaymentIn | None,
    total: Decimal,
    verify: bool = False,
) -> dict:
    """
    Zwraca pola platnosci do zapisu w zamowieniu.

    EFECTIVO: cash_received / change_given zapisywane tak jak przyszly od klienta
    TARJETA: brak dodatkowych pol
    MIXTO: wymagane cash_amount + card_amount

    verify=True wlacza sprawdzanie kwot po stronie serwera.
    """
    payment = payment or PaymentIn()
    payment = PaymentIn.model_construct(
        **{name: require_cents(getattr(payment, name), name) for name in PaymentIn.model_fields}
    )
    fields = {
        "cash_received": None,
        "change_given": None,
        "cash_amount": None,
        "card_amount": None,
    }

    if method == PaymentMethod.CASH:
        fields["cash_received"] = payment.cash_received
        fields["change_given"] = payment.change_given

        if verify and payment.cash_received is not None:
            if payment.cash_received < total:
                raise OrderValidationError(
                    f"Otrzymana gotowka {payment.cash_received} mniejsza niz suma {total}"
                )
            expected_change = payment.cash_received - total
            if payment.change_given is None:
                fields["change_given"] = expected_change
            elif payment.change_given != expected_change:
                raise OrderValidationError(
                    f"Reszta {payment.change_given} rozna od oczekiwanej {expected_change}"
                )

    elif method == PaymentMethod.SPLIT:
        if payment.cash_amount is None or payment.card_amount is None:
            raise OrderValidationError("Platnosc MIXTO wymaga cash_amount i card_amount")

        fields["cash_amount"] = payment.cash_amount
        fields["card_amount"] = payment.card_amount

        if verify and payment.cash_amount + payment.card_amount != total:
            raise OrderValidationError(
                f"Gotowka {payment.cash_amount} + karta {payment.card_amount} != suma {total}"
            )

    return fields


@dataclass(frozen=True)
class PaymentTotals:
    total: Decimal
    cash: Decimal
    card: Decimal
    count: int

    def as_dict(self) -> dict:
        return {
            "total": float(self.total),
            "cash": float(self.cash),
            "card": float(self.card),
            "count": self.count,
        }


def aggregate_payments(orders: Iterable) -> PaymentTotals:
    """
    Kubełki gotowka / karta. Kazde zamowienie trafia do dokladnie jednej reguly:
    EFECTIVO -> cala suma do gotowki, TARJETA -> cala suma do karty,
    MIXTO -> cash_amount do gotowki i card_amount do karty.
    """
    total = cash = card = ZERO
    count = 0

    for order in orders:
        count += 1
        order_total = Decimal(order.total)
        total += order_total

        if order.payment_method == PaymentMethod.CASH.value:
            cash += order_total
        elif order.payment_method == PaymentMethod.CARD.value:
            card += order_total
        elif order.payment_method == PaymentMethod.SPLIT.value:
            cash += Decimal(order.cash_amount or ZERO)
            card += Decimal(order.card_amount or ZERO)
        else:
            logger.warning(f"Order {order.id} has unknown payment method {order.payment_method!r}")

    return PaymentTotals(total=total, cash=cash, card=card, count=count)
