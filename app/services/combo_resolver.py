# app/services/combo_resolver.py
from dataclasses import dataclass

from app.domain.errors import ProductNotFoundError
from app.repos.product_repo import ProductRepo


@dataclass(frozen=True)
class Deduction:
    """Jedna realna dekrementacja stanu. combo_* ustawione gdy pochodzi z combo."""

    product_id: int
    quantity: int
    combo_id: int | None = None
    combo_name: str | None = None

    @property
    def from_combo(self) -> bool:
        return self.combo_id is not None


class ComboResolver:
    """
    Rozwija pozycje koszyka na liste produktow do zdjecia ze stanu.
    Tylko jeden poziom: komponent combo nigdy nie jest combo (pilnuje ProductService).
    """

    def __init__(self, repo: ProductRepo):
        self.repo = repo

    def resolve(self, product_id: int, quantity: int) -> list[Deduction]:
        product = self.repo.get_with_components(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        if product.is_combo and product.combo_items:
            return [
                Deduction(
                    product_id=component.product_id,
                    quantity=component.quantity * quantity,
                    combo_id=product.id,
                    combo_name=product.name,
                )
                for component in product.combo_items
            ]

        return [Deduction(product_id=product.id, quantity=quantity)]
