from datetime import datetime
from foodtracker.extensions import db
from foodtracker.utils.enums import MealCategory


class Meal(db.Model):
    __tablename__ = "meals"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(20), nullable=False, default=MealCategory.SNACK.value)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(5), nullable=True)  # HH:MM
    is_custom_category = db.Column(db.Boolean, nullable=False, default=False)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", back_populates="meals")
    entries = db.relationship(
        "FoodEntry",
        back_populates="meal",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FoodEntry.id",
    )

    __table_args__ = (
        db.Index("ix_meals_user_date", "user_id", "date"),
        db.CheckConstraint(
            "category IN ('breakfast', 'lunch', 'dinner', 'snack')", name="ck_meals_category"
        ),
    )

    def __repr__(self):
        return f"<Meal {self.id}: {self.name} {self.date} {self.category}>"
