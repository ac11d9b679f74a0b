from marshmallow import Schema, fields, validate

_amount = dict(allow_none=True, validate=validate.Range(min=0))


class FoodSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    brand = fields.Str(allow_none=True, validate=validate.Length(max=255))
    barcode = fields.Str(allow_none=True, validate=validate.Length(max=64))
    serving_size = fields.Str(load_default="100g", validate=validate.Length(max=50))
    serving_size_g = fields.Decimal(allow_none=True, validate=validate.Range(min=0, min_inclusive=False))
    nutrient_basis_g = fields.Decimal(load_default=100, validate=validate.Range(min=0, min_inclusive=False))
    image_url = fields.Str(allow_none=True, validate=validate.Length(max=500))

    calories = fields.Decimal(required=True, validate=validate.Range(min=0))
    protein = fields.Decimal(load_default=0, validate=validate.Range(min=0))
    carbs = fields.Decimal(load_default=0, validate=validate.Range(min=0))
    fat = fields.Decimal(load_default=0, validate=validate.Range(min=0))
    fiber = fields.Decimal(load_default=0, validate=validate.Range(min=0))
    sugar = fields.Decimal(load_default=0, validate=validate.Range(min=0))
    sodium = fields.Decimal(load_default=0, validate=validate.Range(min=0))

    saturated_fat = fields.Decimal(**_amount)
    trans_fat = fields.Decimal(**_amount)
    cholesterol = fields.Decimal(**_amount)
    potassium = fields.Decimal(**_amount)
    vitamin_a = fields.Decimal(**_amount)
    vitamin_c = fields.Decimal(**_amount)
    calcium = fields.Decimal(**_amount)
    iron = fields.Decimal(**_amount)


class UpdateFoodSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    brand = fields.Str(allow_none=True, validate=validate.Length(max=255))
    barcode = fields.Str(allow_none=True, validate=validate.Length(max=64))
    serving_size = fields.Str(validate=validate.Length(max=50))
    serving_size_g = fields.Decimal(allow_none=True, validate=validate.Range(min=0, min_inclusive=False))
    nutrient_basis_g = fields.Decimal(validate=validate.Range(min=0, min_inclusive=False))
    image_url = fields.Str(allow_none=True, validate=validate.Length(max=500))

    calories = fields.Decimal(validate=validate.Range(min=0))
    protein = fields.Decimal(validate=validate.Range(min=0))
    carbs = fields.Decimal(validate=validate.Range(min=0))
    fat = fields.Decimal(validate=validate.Range(min=0))
    fiber = fields.Decimal(validate=validate.Range(min=0))
    sugar = fields.Decimal(validate=validate.Range(min=0))
    sodium = fields.Decimal(validate=validate.Range(min=0))

    saturated_fat = fields.Decimal(**_amount)
    trans_fat = fields.Decimal(**_amount)
    cholesterol = fields.Decimal(**_amount)
    potassium = fields.Decimal(**_amount)
    vitamin_a = fields.Decimal(**_amount)
    vitamin_c = fields.Decimal(**_amount)
    calcium = fields.Decimal(**_amount)
    iron = fields.Decimal(**_amount)
