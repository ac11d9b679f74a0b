from marshmallow import Schema, fields, validate, validates_schema, ValidationError
from foodtracker.utils.enums import GoalPeriod, GoalType

PERIODS = [e.value for e in GoalPeriod]
GOAL_TYPES = [e.value for e in GoalType]
_goal = dict(allow_none=True, validate=validate.Range(min=0))


class CreateGoalSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(allow_none=True)
    period = fields.Str(load_default=GoalPeriod.DAILY.value, validate=validate.OneOf(PERIODS))
    goal_type = fields.Str(load_default=GoalType.CUSTOM.value, validate=validate.OneOf(GOAL_TYPES))
    is_active = fields.Bool(load_default=True)

    calorie_goal = fields.Decimal(required=True, validate=validate.Range(min=0, min_inclusive=False))
    protein_goal = fields.Decimal(required=True, validate=validate.Range(min=0))
    carb_goal = fields.Decimal(required=True, validate=validate.Range(min=0))
    fat_goal = fields.Decimal(required=True, validate=validate.Range(min=0))
    fiber_goal = fields.Decimal(**_goal)
    sugar_goal = fields.Decimal(**_goal)
    sodium_goal = fields.Decimal(**_goal)
    water_goal = fields.Decimal(**_goal)

    tolerance_lower = fields.Int(load_default=90, validate=validate.Range(min=0, max=100))
    tolerance_upper = fields.Int(load_default=110, validate=validate.Range(min=100, max=500))


class UpdateGoalSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=100))
    description = fields.Str(allow_none=True)
    period = fields.Str(validate=validate.OneOf(PERIODS))
    goal_type = fields.Str(validate=validate.OneOf(GOAL_TYPES))
    is_active = fields.Bool()

    calorie_goal = fields.Decimal(validate=validate.Range(min=0, min_inclusive=False))
    protein_goal = fields.Decimal(validate=validate.Range(min=0))
    carb_goal = fields.Decimal(validate=validate.Range(min=0))
    fat_goal = fields.Decimal(validate=validate.Range(min=0))
    fiber_goal = fields.Decimal(**_goal)
    sugar_goal = fields.Decimal(**_goal)
    sodium_goal = fields.Decimal(**_goal)
    water_goal = fields.Decimal(**_goal)

    tolerance_lower = fields.Int(validate=validate.Range(min=0, max=100))
    tolerance_upper = fields.Int(validate=validate.Range(min=100, max=500))


class GoalTemplateSchema(Schema):
    goal_type = fields.Str(required=True, validate=validate.OneOf(GOAL_TYPES))
    weight = fields.Float(allow_none=True, validate=validate.Range(min=20, max=500))  # kg
    height = fields.Float(allow_none=True, validate=validate.Range(min=50, max=300))  # cm
    age = fields.Int(allow_none=True, validate=validate.Range(min=1, max=120))
    gender = fields.Str(allow_none=True, validate=validate.OneOf(["male", "female"]))
    activity_level = fields.Str(
        load_default="moderate",
        validate=validate.OneOf(["sedentary", "light", "moderate", "active", "very_active"]),
    )

    @validates_schema
    def validate_profile(self, data, **kwargs):
        profile = [data.get(k) for k in ("weight", "height", "age", "gender")]
        if any(v is not None for v in profile) and any(v is None for v in profile):
            raise ValidationError("weight, height, age and gender must be given together")
