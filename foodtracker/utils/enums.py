from enum import Enum


class MealCategory(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodUnit(str, Enum):
    G = "g"
    KG = "kg"
    ML = "ml"
    L = "l"
    CUP = "cup"
    TBSP = "tbsp"
    TSP = "tsp"
    PIECE = "piece"
    SLICE = "slice"


class FoodSource(str, Enum):
    MANUAL = "manual"
    OPENFOODFACTS = "openfoodfacts"
    USDA = "usda"


class GoalPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class GoalType(str, Enum):
    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    MAINTENANCE = "maintenance"
    MUSCLE_GAIN = "muscle_gain"
    ATHLETIC_PERFORMANCE = "athletic_performance"
    CUSTOM = "custom"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
