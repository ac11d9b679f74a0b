from datetime import datetime
from flask import jsonify
from foodtracker.extensions import db


def home_index():
    return jsonify({
        "name": "FoodTracker API",
        "status": "online",
    })


def health_check():
    db_status = "healthy"
    try:
        # Ping the database
        db.session.execute(db.text("SELECT 1"))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    return jsonify({
        "status": "online",
        "database": db_status,
        "server_time": datetime.utcnow().isoformat(),
    }), 200 if db_status == "healthy" else 503
