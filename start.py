#!/usr/bin/env python3
import os
from dotenv import load_dotenv
from cems import create_app, db
from create_admin import create_admin_user

# Load environment variables
load_dotenv()

# Create the Flask application
app = create_app()

# Create database tables if they don't exist
with app.app_context():
    app.logger.info("Attempting to create database tables...")
    app.logger.info(f"Tables known to SQLAlchemy metadata before create_all: {list(db.metadata.tables.keys())}")
    db.create_all()
    app.logger.info("Database tables check/creation complete.")
    create_admin_user()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 4000))
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_ENV") == "development")
