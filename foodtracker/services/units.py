from decimal import Decimal, InvalidOperation

from foodtracker.errors import ValidationError
from foodtracker.utils.enums import FoodUnit
from foodtracker.utils.http import TWO_PLACES

MAX_QUANTITY = Decimal("99999999.99")

# Grams-equivalent of one unit; ml is treated as 1 g
UNIT_GRAMS = {
    FoodUnit.G: Decimal("1"),
    FoodUnit.KG: Decimal("1000"),
    FoodUnit.ML: Decimal("1"),
    FoodUnit.L: Decimal("1000"),
    FoodUnit.CUP: Decimal("240"),
    FoodUnit.TBSP: Decimal("15"),
    FoodUnit.TSP: Decimal("5"),
}
PER_SERVING_UNITS = (FoodUnit.PIECE, FoodUnit.SLICE)


def parse_unit(value) -> FoodUnit:
    if isinstance(value, FoodUnit):
        return value
    try:
        return FoodUnit(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(u.value for u in FoodUnit)
        raise ValidationError(f"Unknown unit '{value}', expected one of: {allowed}", code="INVALID_UNIT")


def parse_quantity(value) -> Decimal:
    """Parse an entry quantity that fits the ``Numeric(10, 2)`` column exactly."""
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid quantity '{value}'", code="INVALID_QUANTITY")
    if not quantity.is_finite() or quantity <= 0:
        raise ValidationError("Quantity must be greater than zero", code="INVALID_QUANTITY")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}", code="INVALID_QUANTITY")
    if quantity != quantity.quantize(TWO_PLACES):
        raise ValidationError("Quantity allows at most two decimal places", code="INVALID_QUANTITY")
    return quantity


def to_grams(quantity, unit, food) -> Decimal:
    """Convert an entry quantity to grams-equivalent for ``food``."""
    quantity = parse_quantity(quantity)
    unit = parse_unit(unit)
    if unit in PER_SERVING_UNITS:
        if food.serving_size_g is None or Decimal(food.serving_size_g) <= 0:
            raise ValidationError(
                f"Food {food.id} has no per-{unit.value} weight, use a mass or volume unit",
                code="UNCONVERTIBLE_UNIT",
            )
        return quantity * Decimal(food.serving_size_g)
    return quantity * UNIT_GRAMS[unit]
