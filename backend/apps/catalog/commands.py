from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")

PRICE_MAX = Decimal("99999999.99")
NAME_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Either a parsed ``value`` or a human readable ``error``."""

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult[T]":
        return cls(error=error)


def parse_price(raw: Any) -> ParseResult[Decimal]:
    """Parse admin price input into a non-negative Decimal with two places.

    Accepts ints, Decimals and numeric strings (a comma decimal separator is
    tolerated). Floats go through ``str`` so ``0.1`` stays ``0.10``.
    """
    if raw is None or isinstance(raw, bool):
        return ParseResult.failure("Price is required.")
    text = str(raw).strip().replace(",", ".")
    if not text:
        return ParseResult.failure("Price is required.")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return ParseResult.failure("Price must be a number.")
    if not value.is_finite():
        return ParseResult.failure("Price must be a finite number.")
    if value < 0:
        return ParseResult.failure("Price cannot be negative.")
    if value.as_tuple().exponent < -2:
        return ParseResult.failure("Price may have at most two decimal places.")
    if value > PRICE_MAX:
        return ParseResult.failure("Price is too large.")
    return ParseResult.success(value.quantize(Decimal("0.01")))


def parse_text(
    raw: Any, *, label: str, required: bool = False, max_length: Optional[int] = None
) -> ParseResult[str]:
    text = "" if raw is None else str(raw).strip()
    if required and not text:
        return ParseResult.failure(f"{label} is required.")
    if max_length is not None and len(text) > max_length:
        return ParseResult.failure(f"{label} must be at most {max_length} characters.")
    return ParseResult.success(text)


def _collect(results: Dict[str, ParseResult]) -> Dict[str, str]:
    return {name: r.error for name, r in results.items() if not r.ok}


@dataclass
class ProductCreateCommand:
    name: str
    price: Optional[Decimal]
    description: str = ""
    image: str = ""
    category: str = ""
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "ProductCreateCommand":
        data = dict(payload or {})
        # ids are server assigned
        data.pop("id", None)
        results = {
            "name": parse_text(
                data.get("name"), label="Name", required=True, max_length=NAME_MAX_LENGTH
            ),
            "price": parse_price(data.get("price")),
            "description": parse_text(data.get("description"), label="Description"),
            "image": parse_text(data.get("image"), label="Image"),
            "category": parse_text(
                data.get("category"), label="Category", max_length=CATEGORY_MAX_LENGTH
            ),
        }
        return ProductCreateCommand(
            name=results["name"].value or "",
            price=results["price"].value,
            description=results["description"].value or "",
            image=results["image"].value or "",
            category=results["category"].value or "",
            errors=_collect(results),
        )


@dataclass
class ProductUpdateCommand:
    product_id: int
    partial: bool
    name: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def changes(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in (
                ("name", self.name),
                ("price", self.price),
                ("description", self.description),
                ("image", self.image),
                ("category", self.category),
            )
            if value is not None
        }

    @staticmethod
    def from_raw(
        product_id: int, payload: Dict[str, Any], partial: bool
    ) -> "ProductUpdateCommand":
        """A full update (``partial=False``) requires name and price like create."""
        if not partial:
            full = ProductCreateCommand.from_raw(payload)
            return ProductUpdateCommand(
                product_id=product_id,
                partial=False,
                name=full.name,
                price=full.price,
                description=full.description,
                image=full.image,
                category=full.category,
                errors=full.errors,
            )
        data = dict(payload or {})
        data.pop("id", None)
        parsers = {
            "name": lambda v: parse_text(
                v, label="Name", required=True, max_length=NAME_MAX_LENGTH
            ),
            "price": parse_price,
            "description": lambda v: parse_text(v, label="Description"),
            "image": lambda v: parse_text(v, label="Image"),
            "category": lambda v: parse_text(
                v, label="Category", max_length=CATEGORY_MAX_LENGTH
            ),
        }
        results = {key: parse(data[key]) for key, parse in parsers.items() if key in data}
        values = {key: r.value for key, r in results.items() if r.ok}
        return ProductUpdateCommand(
            product_id=product_id, partial=True, errors=_collect(results), **values
        )
