from .home_routes import home_bp
from .auth_routes import auth_bp
from .food_routes import food_bp
from .meal_routes import meal_bp
from .nutrition_routes import nutrition_bp
from .goal_routes import goal_bp
from .calendar_routes import calendar_bp


def register_routes(app):
    app.register_blueprint(home_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(food_bp)
    app.register_blueprint(meal_bp)
    app.register_blueprint(nutrition_bp)
    app.register_blueprint(goal_bp)
    app.register_blueprint(calendar_bp)
