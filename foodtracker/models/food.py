from datetime import datetime
from foodtracker.extensions import db
from foodtracker.utils.enums import FoodSource
from foodtracker.utils.http import round2

# Macro and core nutrients every food carries
CORE_NUTRIENTS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")
# Optional micronutrients, missing values count as zero when aggregating
MICRO_NUTRIENTS = (
    "saturated_fat",
    "trans_fat",
    "cholesterol",
    "potassium",
    "vitamin_a",
    "vitamin_c",
    "calcium",
    "iron",
)
NUTRIENTS = CORE_NUTRIENTS + MICRO_NUTRIENTS


class Food(db.Model):
    __tablename__ = "foods"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    brand = db.Column(db.String(255), nullable=True)
    barcode = db.Column(db.String(64), nullable=True, index=True)
    source = db.Column(db.String(20), nullable=False, default=FoodSource.MANUAL.value)
    external_id = db.Column(db.String(128), nullable=True)

    # Nutrient values are expressed per nutrient_basis_g grams
    nutrient_basis_g = db.Column(db.Numeric(10, 2), nullable=False, default=100)
    serving_size = db.Column(db.String(50), nullable=False, default="100g")
    # Weight of one piece or slice, required for those units
    serving_size_g = db.Column(db.Numeric(10, 2), nullable=True)

    calories = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    protein = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    carbs = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fat = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fiber = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    sugar = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    sodium = db.Column(db.Numeric(10, 2), nullable=False, default=0)  # mg

    saturated_fat = db.Column(db.Numeric(10, 2), nullable=True)
    trans_fat = db.Column(db.Numeric(10, 2), nullable=True)
    cholesterol = db.Column(db.Numeric(10, 2), nullable=True)
    potassium = db.Column(db.Numeric(10, 2), nullable=True)
    vitamin_a = db.Column(db.Numeric(10, 2), nullable=True)
    vitamin_c = db.Column(db.Numeric(10, 2), nullable=True)
    calcium = db.Column(db.Numeric(10, 2), nullable=True)
    iron = db.Column(db.Numeric(10, 2), nullable=True)

    image_url = db.Column(db.String(500), nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    usage_count = db.Column(db.Integer, nullable=False, default=0)
    is_cached = db.Column(db.Boolean, nullable=False, default=False)
    last_synced_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_manual(self) -> bool:
        return self.source == FoodSource.MANUAL.value

    def to_dict(self):
        data = {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "barcode": self.barcode,
            "source": self.source,
            "external_id": self.external_id,
            "nutrient_basis_g": round2(self.nutrient_basis_g),
            "serving_size": self.serving_size,
            "serving_size_g": round2(self.serving_size_g),
            "image_url": self.image_url,
            "created_by_id": self.created_by_id,
            "usage_count": self.usage_count or 0,
            "is_cached": bool(self.is_cached),
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
        }
        for name in NUTRIENTS:
            data[name] = round2(getattr(self, name))
        return data

    def __repr__(self):
        return f"<Food {self.id}: {self.name}>"
