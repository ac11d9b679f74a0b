from datetime import datetime
from foodtracker.extensions import db
from foodtracker.utils.http import round2


class FoodEntry(db.Model):
    __tablename__ = "food_entries"

    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)
    food_id = db.Column(db.Integer, db.ForeignKey("foods.id"), nullable=False, index=True)
    quantity = db.Column(db.Numeric(10, 2), nullable=False)
    unit = db.Column(db.String(10), nullable=False, default="g")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    meal = db.relationship("Meal", back_populates="entries")
    food = db.relationship("Food")

    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_food_entries_quantity"),
    )

    def to_dict(self, nutrients=None):
        data = {
            "id": self.id,
            "meal_id": self.meal_id,
            "food_id": self.food_id,
            "quantity": round2(self.quantity),
            "unit": self.unit,
            "food": self.food.to_dict() if self.food is not None else None,
        }
        if nutrients is not None:
            data["nutrients"] = {k: round2(v) for k, v in nutrients.items()}
        return data
