from decimal import Decimal

import pytest

from foodtracker import create_app
from foodtracker.extensions import db
from foodtracker.models.food import Food
from foodtracker.models.role import Role
from foodtracker.models.user import User
from foodtracker.utils.auth import hash_password
from foodtracker.utils.enums import FoodSource


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "SECRET_KEY": "test-secret",
        "JWT_SECRET_KEY": "test-jwt-secret",
        "OPEN_FOOD_FACTS_ENABLED": False,
    })
    with app.app_context():
        db.create_all()
        for name in ["USER", "ADMIN"]:
            db.session.add(Role(name=name))
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def user(app):
    u = User(
        name="User",
        email="user@example.com",
        password=hash_password("secret"),
        role=Role.query.filter_by(name="USER").first(),
    )
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture()
def auth_headers(client, user):
    r = client.post("/api/auth/login", json={"email": "user@example.com", "password": "secret"})
    return {"Authorization": f"Bearer {r.get_json()['access_token']}"}


def make_food(name="Chicken", calories=165, protein=31, carbs=0, fat=3.6, owner=None, **extra):
    food = Food(
        name=name,
        source=extra.pop("source", FoodSource.MANUAL.value),
        created_by_id=owner.id if owner is not None else None,
        calories=Decimal(str(calories)),
        protein=Decimal(str(protein)),
        carbs=Decimal(str(carbs)),
        fat=Decimal(str(fat)),
        **extra,
    )
    db.session.add(food)
    db.session.commit()
    return food


@pytest.fixture()
def food_factory(app):
    return make_food
