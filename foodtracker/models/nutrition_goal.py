from datetime import datetime
from foodtracker.extensions import db
from foodtracker.utils.enums import GoalPeriod, GoalType
from foodtracker.utils.http import round2

GOAL_FIELDS = (
    "calorie_goal",
    "protein_goal",
    "carb_goal",
    "fat_goal",
    "fiber_goal",
    "sugar_goal",
    "sodium_goal",
    "water_goal",
)


class NutritionGoal(db.Model):
    __tablename__ = "nutrition_goals"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    period = db.Column(db.String(10), nullable=False, default=GoalPeriod.DAILY.value)
    goal_type = db.Column(db.String(30), nullable=False, default=GoalType.CUSTOM.value)
    is_active = db.Column(db.Boolean, nullable=False, default=False)

    calorie_goal = db.Column(db.Numeric(10, 2), nullable=True)
    protein_goal = db.Column(db.Numeric(10, 2), nullable=True)
    carb_goal = db.Column(db.Numeric(10, 2), nullable=True)
    fat_goal = db.Column(db.Numeric(10, 2), nullable=True)
    fiber_goal = db.Column(db.Numeric(10, 2), nullable=True)
    sugar_goal = db.Column(db.Numeric(10, 2), nullable=True)
    sodium_goal = db.Column(db.Numeric(10, 2), nullable=True)
    water_goal = db.Column(db.Numeric(10, 2), nullable=True)

    # Percent of the goal counted as "met"
    tolerance_lower = db.Column(db.Integer, nullable=False, default=90)
    tolerance_upper = db.Column(db.Integer, nullable=False, default=110)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "period": self.period,
            "goal_type": self.goal_type,
            "is_active": bool(self.is_active),
            "tolerance_lower": self.tolerance_lower,
            "tolerance_upper": self.tolerance_upper,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        for name in GOAL_FIELDS:
            data[name] = round2(getattr(self, name))
        return data
