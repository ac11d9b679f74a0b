from datetime import datetime
from foodtracker.extensions import db
from foodtracker.utils.http import round2


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, default="")
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=True)
    timezone = db.Column(db.String(64), nullable=True)

    # Daily goal preferences, used when no active daily NutritionGoal exists
    daily_calorie_goal = db.Column(db.Numeric(10, 2), nullable=True)
    daily_protein_goal = db.Column(db.Numeric(10, 2), nullable=True)
    daily_carb_goal = db.Column(db.Numeric(10, 2), nullable=True)
    daily_fat_goal = db.Column(db.Numeric(10, 2), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    role = db.relationship("Role", backref="users")
    meals = db.relationship("Meal", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    daily_nutrition = db.relationship("DailyNutrition", cascade="all, delete-orphan", passive_deletes=True)
    nutrition_goals = db.relationship("NutritionGoal", cascade="all, delete-orphan", passive_deletes=True)
    refresh_tokens = db.relationship("RefreshToken", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def roles(self):
        return [self.role.name] if self.role else ["USER"]

    def goal_preferences(self):
        return {
            "calories": self.daily_calorie_goal,
            "protein": self.daily_protein_goal,
            "carbs": self.daily_carb_goal,
            "fat": self.daily_fat_goal,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": self.roles,
            "timezone": self.timezone,
            "preferences": {
                "daily_calorie_goal": round2(self.daily_calorie_goal),
                "daily_protein_goal": round2(self.daily_protein_goal),
                "daily_carb_goal": round2(self.daily_carb_goal),
                "daily_fat_goal": round2(self.daily_fat_goal),
            },
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
