from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    name = fields.Str(load_default="", validate=validate.Length(max=100))
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=6))


class LoginSchema(Schema):
    email = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, validate=validate.Length(min=1))


class RefreshSchema(Schema):
    refresh_token = fields.Str(required=True, validate=validate.Length(min=1))


class GoalPreferencesSchema(Schema):
    daily_calorie_goal = fields.Decimal(allow_none=True, validate=validate.Range(min=0))
    daily_protein_goal = fields.Decimal(allow_none=True, validate=validate.Range(min=0))
    daily_carb_goal = fields.Decimal(allow_none=True, validate=validate.Range(min=0))
    daily_fat_goal = fields.Decimal(allow_none=True, validate=validate.Range(min=0))
    timezone = fields.Str(allow_none=True, validate=validate.Length(max=64))
