from datetime import date
from decimal import Decimal

from foodtracker import create_app
from foodtracker.extensions import db
from foodtracker.models.food import Food
from foodtracker.models.role import Role
from foodtracker.models.user import User
from foodtracker.services.meal_service import create_meal
from foodtracker.utils.auth import hash_password
from foodtracker.utils.enums import FoodSource, UserRole

app = create_app()

with app.app_context():
    # ensure tables exist (non-destructive: won't alter existing columns)
    db.create_all()

    for role_name, description in ((UserRole.USER.value, "Regular user"), (UserRole.ADMIN.value, "Administrator")):
        if not Role.query.filter_by(name=role_name).first():
            db.session.add(Role(name=role_name, description=description))
    db.session.flush()

    user = User.query.filter_by(email="user@example.com").first()
    if not user:
        user = User(
            name="User Demo",
            email="user@example.com",
            password=hash_password("secret"),
            role=Role.query.filter_by(name=UserRole.USER.value).first(),
            daily_calorie_goal=2000,
            daily_protein_goal=120,
            daily_carb_goal=250,
            daily_fat_goal=65,
        )
        db.session.add(user)
        db.session.flush()

    def add_food(name, cal, p, c, f, fiber=0, sugar=0, sodium=0, serving_size_g=None):
        food = Food.query.filter_by(name=name, source=FoodSource.MANUAL.value).first()
        if not food:
            food = Food(
                name=name,
                source=FoodSource.MANUAL.value,
                created_by_id=user.id,
                calories=Decimal(str(cal)),
                protein=Decimal(str(p)),
                carbs=Decimal(str(c)),
                fat=Decimal(str(f)),
                fiber=Decimal(str(fiber)),
                sugar=Decimal(str(sugar)),
                sodium=Decimal(str(sodium)),
                serving_size_g=serving_size_g,
            )
            db.session.add(food)
            db.session.flush()
        return food

    oats = add_food("Rolled oats", 389, 16.9, 66.3, 6.9, fiber=10.6, sugar=1)
    egg = add_food("Boiled egg", 155, 13.0, 1.1, 11.0, sodium=124, serving_size_g=50)
    banana = add_food("Banana", 89, 1.1, 22.8, 0.3, fiber=2.6, sugar=12.2, serving_size_g=118)
    chicken = add_food("Grilled chicken breast", 165, 31.0, 0.0, 3.6, sodium=74)
    rice = add_food("White rice, cooked", 130, 2.7, 28.0, 0.3, fiber=0.4)
    db.session.commit()

    today = date.today()
    if not user.meals:
        create_meal(user.id, {
            "name": "Oats with egg and banana",
            "date": today,
            "time": "07:45",
            "foods": [
                {"food_id": oats.id, "quantity": 60, "unit": "g"},
                {"food_id": egg.id, "quantity": 1, "unit": "piece"},
                {"food_id": banana.id, "quantity": 1, "unit": "piece"},
            ],
        })
        create_meal(user.id, {
            "name": "Chicken and rice",
            "date": today,
            "time": "12:30",
            "foods": [
                {"food_id": rice.id, "quantity": 200, "unit": "g"},
                {"food_id": chicken.id, "quantity": 120, "unit": "g"},
            ],
        })

    print("✅ Seed completed.")
