from typing import List, Optional
from cems.extensions import db
from cems.models import User


class UserRepository:
    @staticmethod
    def sign_up(user: User) -> User:
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def find_by_email(email: str) -> Optional[User]:
        return User.query.filter_by(email=email).first()

    @staticmethod
    def find_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def list_users() -> List[User]:
        return User.query.order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def count() -> int:
        return User.query.count()

    @staticmethod
    def update_user(user: User, attrs: dict) -> User:
        for key, value in attrs.items():
            if hasattr(user, key):
                setattr(user, key, value)
        db.session.commit()
        return user
