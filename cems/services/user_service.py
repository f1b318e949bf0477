from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy.exc import IntegrityError
from cems.auth import Operation, authorize, issue_token
from cems.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    MissingFieldsError,
    NotFoundError,
    ValidationError,
)
from cems.extensions import db
from cems.models import User
from cems.models.enums import UserRole
from cems.repositories import UserRepository
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SIGNUP_ROLES = {UserRole.STUDENT, UserRole.ORGANIZER}
PROFILE_FIELDS = ["name", "email", "phone", "avatar"]


def require_strings(data, fields):
    for field in fields:
        if field in data and not isinstance(data[field], str):
            raise ValidationError(f"{field} must be a string")


class UserService:
    @staticmethod
    def sign_up(user_data):
        required_fields = ["name", "email", "password", "role"]
        missing = [f for f in required_fields if not user_data.get(f)]
        if missing:
            raise MissingFieldsError(missing)
        require_strings(user_data, ["name", "email", "password"])

        # Admins are never self-registered
        try:
            role = UserRole[str(user_data["role"]).upper()]
        except KeyError:
            role = None
        if role not in SIGNUP_ROLES:
            logger.warning(f"Signup attempt with invalid role: {user_data['role']}")
            raise ValidationError("Invalid role")

        email = user_data["email"].strip().lower()
        if UserRepository.find_by_email(email):
            logger.warning(f"Signup attempt with existing email: {email}")
            raise ConflictError("Email already exists")

        user = User(
            name=user_data["name"],
            email=email,
            password=generate_password_hash(user_data["password"]),
            role=role,
        )

        try:
            created_user = UserRepository.sign_up(user)
        except IntegrityError:
            # Lost a race against a concurrent signup with the same email
            db.session.rollback()
            logger.warning(f"Concurrent signup with existing email: {email}")
            raise ConflictError("Email already exists")

        logger.info(f"User created successfully: {created_user.email}")
        return {"token": issue_token(created_user), "user": created_user.to_dict()}

    @staticmethod
    def sign_in(email, password):
        if not email or not password:
            raise ValidationError("Email and password are required")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be strings")

        user = UserRepository.find_by_email(email.strip().lower())
        if not user:
            logger.warning(f"Login attempt with non-existent email: {email}")
            raise AuthenticationError("Invalid credentials")

        if not check_password_hash(user.password, password):
            logger.warning(f"Failed login attempt for user: {email}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"User logged in successfully: {email}")
        return {"token": issue_token(user), "user": user.to_dict()}

    @staticmethod
    def list_users(acting_user: User):
        authorize(acting_user, Operation.LIST_USERS)
        return [user.to_dict() for user in UserRepository.list_users()]

    @staticmethod
    def update_user(user_id: int, data: dict, acting_user: User):
        """Update a profile; users edit themselves, admins edit anyone.

        A fresh token is returned when users update their own profile.
        """
        authorize(acting_user, Operation.UPDATE_USER)
        is_self = acting_user.id == user_id
        if not is_self and acting_user.role != UserRole.ADMIN:
            raise AuthorizationError("Access denied")

        user = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        updates = {field: data[field] for field in PROFILE_FIELDS if field in data}
        require_strings(
            {field: value for field, value in updates.items() if value is not None},
            PROFILE_FIELDS,
        )
        if "name" in updates and not updates["name"]:
            raise ValidationError("Name cannot be empty")
        if "email" in updates:
            if not updates["email"]:
                raise ValidationError("Email cannot be empty")
            updates["email"] = updates["email"].strip().lower()
            other = UserRepository.find_by_email(updates["email"])
            if other and other.id != user.id:
                raise ConflictError("Email already exists")

        try:
            updated_user = UserRepository.update_user(user, updates)
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("Email already exists")

        logger.info(f"User {user_id} updated by user {acting_user.id}")
        result = {"user": updated_user.to_dict()}
        if is_self:
            result["message"] = "Profile updated successfully"
            result["token"] = issue_token(updated_user)
        else:
            result["message"] = "User updated successfully"
        return result
