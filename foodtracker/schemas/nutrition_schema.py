from marshmallow import Schema, fields, validate


class DayLogSchema(Schema):
    water_intake_ml = fields.Int(validate=validate.Range(min=0))
    water_goal_ml = fields.Int(validate=validate.Range(min=0))
    exercise_calories_burned = fields.Int(validate=validate.Range(min=0))
    notes = fields.Str(allow_none=True)
