# src/models/product.py

"""Product data model shared by providers, cache, and aggregator."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENTS = Decimal("0.01")


def to_money(value: object) -> Decimal:
    """Convert a JSON number or numeric string to a 2-place Decimal.

    Floats go through ``str()`` so ``12.9`` stays ``12.90`` instead of
    picking up binary noise.

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a monetary value: {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a monetary value: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a monetary value: {value!r}")
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Product:
    """One matched offer from one market at one point in time.

    ``original_price`` is the list price shown next to a discount;
    ``None`` means the market did not expose one, not "no discount".
    """

    name: str
    price: Decimal
    market: str
    original_price: Decimal | None = None
    url: str = ""
    image: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("name is required")
        if self.price < 0:
            raise ValueError("price must be non-negative")

    @property
    def has_discount(self) -> bool:
        """True when a list price above the sale price is shown."""
        return (
            self.original_price is not None
            and self.original_price > self.price
        )

    @property
    def dedup_key(self) -> tuple[str, Decimal, str]:
        """Identity used to spot repeated offers inside one market."""
        return (self.name, self.price, self.market)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain JSON-safe record."""
        return {
            "name": self.name,
            "price": float(self.price),
            "originalPrice": (
                float(self.original_price)
                if self.original_price is not None
                else None
            ),
            "market": self.market,
            "url": self.url,
            "image": self.image,
        }
