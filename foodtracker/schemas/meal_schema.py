from marshmallow import Schema, fields, validate
from foodtracker.utils.enums import FoodUnit, MealCategory

CATEGORIES = [e.value for e in MealCategory]
UNITS = [e.value for e in FoodUnit]


class FoodEntrySchema(Schema):
    food_id = fields.Int(required=True)
    quantity = fields.Decimal(required=True, validate=validate.Range(min=0, min_inclusive=False))
    unit = fields.Str(load_default=FoodUnit.G.value, validate=validate.OneOf(UNITS))


class UpdateFoodEntrySchema(Schema):
    food_id = fields.Int()
    quantity = fields.Decimal(validate=validate.Range(min=0, min_inclusive=False))
    unit = fields.Str(validate=validate.OneOf(UNITS))


class CreateMealSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    date = fields.Date(required=True)
    time = fields.Str(allow_none=True)  # HH:MM, checked by the categorizer
    category = fields.Str(allow_none=True, validate=validate.OneOf(CATEGORIES))
    notes = fields.Str(allow_none=True)
    foods = fields.List(fields.Nested(FoodEntrySchema), load_default=[])


class UpdateMealSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    date = fields.Date()
    time = fields.Str(allow_none=True)
    # null switches back to time based categorisation
    category = fields.Str(allow_none=True, validate=validate.OneOf(CATEGORIES))
    notes = fields.Str(allow_none=True)
