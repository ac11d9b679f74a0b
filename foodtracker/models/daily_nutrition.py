from datetime import datetime
from decimal import Decimal
from foodtracker.extensions import db
from foodtracker.models.food import NUTRIENTS
from foodtracker.utils.http import round2

# Nutrient -> goal snapshot column
GOAL_COLUMNS = {
    "calories": "calorie_goal",
    "protein": "protein_goal",
    "carbs": "carb_goal",
    "fat": "fat_goal",
}
DAY_LOG_FIELDS = ("water_intake_ml", "water_goal_ml", "exercise_calories_burned", "notes")


def progress_ratio(total, goal):
    """total / goal, or None when no goal is configured."""
    if goal is None:
        return None
    goal = Decimal(goal)
    if goal <= 0:
        return None
    return Decimal(total or 0) / goal


def progress_status(ratio, lower=90, upper=110):
    if ratio is None:
        return None
    percent = ratio * 100
    if percent < lower:
        return "under"
    if percent > upper:
        return "over"
    return "met"


class DailyNutrition(db.Model):
    __tablename__ = "daily_nutrition"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False)

    total_calories = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_protein = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_carbs = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_fat = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_fiber = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_sugar = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_sodium = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_saturated_fat = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_trans_fat = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_cholesterol = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_potassium = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_vitamin_a = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_vitamin_c = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_calcium = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_iron = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    meal_count = db.Column(db.Integer, nullable=False, default=0)

    # Goal snapshot taken at recompute time, None when no goal is configured
    calorie_goal = db.Column(db.Numeric(10, 2), nullable=True)
    protein_goal = db.Column(db.Numeric(10, 2), nullable=True)
    carb_goal = db.Column(db.Numeric(10, 2), nullable=True)
    fat_goal = db.Column(db.Numeric(10, 2), nullable=True)

    # User maintained day log, never touched by recompute
    water_intake_ml = db.Column(db.Integer, nullable=False, default=0)
    water_goal_ml = db.Column(db.Integer, nullable=False, default=2000)
    exercise_calories_burned = db.Column(db.Integer, nullable=False, default=0)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "date", name="uq_daily_nutrition_user_date"),
    )

    def totals(self):
        return {name: getattr(self, f"total_{name}") or Decimal("0") for name in NUTRIENTS}

    def progress(self, lower=90, upper=110):
        result = {}
        for nutrient, column in GOAL_COLUMNS.items():
            ratio = progress_ratio(getattr(self, f"total_{nutrient}"), getattr(self, column))
            result[nutrient] = {
                "ratio": round2(ratio),
                "percent": round2(ratio * 100) if ratio is not None else None,
                "status": progress_status(ratio, lower, upper),
            }
        return result

    def to_dict(self, include_progress=True):
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "meal_count": self.meal_count or 0,
            "totals": {name: round2(value) for name, value in self.totals().items()},
            "goals": {nutrient: round2(getattr(self, column)) for nutrient, column in GOAL_COLUMNS.items()},
            "water_intake_ml": self.water_intake_ml or 0,
            "water_goal_ml": self.water_goal_ml,
            "exercise_calories_burned": self.exercise_calories_burned or 0,
            "notes": self.notes,
        }
        if include_progress:
            data["progress"] = self.progress()
        return data
