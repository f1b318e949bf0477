import os
from cems import create_app
from cems.models import User
from cems.models.enums import UserRole
from cems.extensions import db
from werkzeug.security import generate_password_hash

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@cems.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def create_admin_user(update=False):
    """Create the default admin; must run inside an app context."""
    admin = User.query.filter_by(email=ADMIN_EMAIL).first()
    if not admin:
        admin = User(
            name="Admin User",
            email=ADMIN_EMAIL,
            password=generate_password_hash(ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        )
        db.session.add(admin)
        db.session.commit()
        print("Admin user created successfully!")
    elif update:
        admin.password = generate_password_hash(ADMIN_PASSWORD)
        admin.role = UserRole.ADMIN
        db.session.commit()
        print("Admin user updated successfully!")
    else:
        print("Admin user already exists!")
    return admin


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        create_admin_user(update=True)
