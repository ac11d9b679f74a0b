from decimal import Decimal
from types import SimpleNamespace

import pytest

from foodtracker.errors import ValidationError
from foodtracker.services.units import MAX_QUANTITY, parse_quantity, parse_unit, to_grams
from foodtracker.utils.enums import FoodUnit


def food(serving_size_g=None):
    return SimpleNamespace(id=1, serving_size_g=serving_size_g)


@pytest.mark.parametrize("quantity,unit,grams", [
    ("150", "g", Decimal("150")),
    ("0.5", "kg", Decimal("500.0")),
    ("200", "ml", Decimal("200")),
    ("1", "l", Decimal("1000")),
    ("2", "cup", Decimal("480")),
    ("1", "tbsp", Decimal("15")),
    ("3", "tsp", Decimal("15")),
])
def test_mass_and_volume_units(quantity, unit, grams):
    assert to_grams(quantity, unit, food()) == grams


def test_piece_uses_serving_weight():
    assert to_grams(2, "piece", food(Decimal("50"))) == Decimal("100")
    assert to_grams(3, FoodUnit.SLICE, food(Decimal("30"))) == Decimal("90")


def test_piece_without_serving_weight_is_rejected():
    with pytest.raises(ValidationError) as exc:
        to_grams(1, "piece", food())
    assert exc.value.code == "UNCONVERTIBLE_UNIT"


@pytest.mark.parametrize("value", [0, -1, "abc", None, "NaN", "0.004", "0.006", "100000000", "1e9"])
def test_invalid_quantity(value):
    with pytest.raises(ValidationError) as exc:
        parse_quantity(value)
    assert exc.value.code == "INVALID_QUANTITY"


def test_unknown_unit():
    with pytest.raises(ValidationError) as exc:
        parse_unit("oz")
    assert exc.value.code == "INVALID_UNIT"


def test_unit_is_case_insensitive():
    assert parse_unit(" G ") == FoodUnit.G


def test_quantity_fits_storage_column():
    assert parse_quantity("0.01") == Decimal("0.01")
    assert parse_quantity("1.500") == Decimal("1.5")
    assert parse_quantity(MAX_QUANTITY) == MAX_QUANTITY
