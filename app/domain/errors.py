# app/domain/errors.py


class OrderValidationError(ValueError):
    """Zle dane wejsciowe (pusty koszyk, nieznana metoda platnosci...). Odrzucane przed zapisem."""


class ProductNotFoundError(LookupError):
    def __init__(self, product_id: int):
        super().__init__(f"Produkt {product_id} nie istnieje")
        self.product_id = product_id


class ComboCompositionError(ValueError):
    """Niepoprawny sklad combo (combo w combo, brak komponentu, ilosc < 1)."""


class TransactionTimeoutError(RuntimeError):
    """Przekroczony limit oczekiwania na polaczenie lub czasu transakcji. Mozna ponowic."""
