"""Access control: who is calling, and may they do this.

Every role check in the API goes through ``POLICIES``. Routes resolve the
caller once with ``login_required`` and services that receive an acting user
call ``authorize`` against the same table.
"""
from enum import Enum
from functools import wraps
from typing import Optional

from flask import g, jsonify
from flask_jwt_extended import (
    create_access_token,
    get_jwt_identity,
    verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from cems.exceptions import AuthenticationError, AuthorizationError
from cems.extensions import jwt
from cems.models import User
from cems.models.enums import UserRole
from cems.repositories import UserRepository


class Operation(Enum):
    CREATE_EVENT = "create_event"
    APPROVE_EVENT = "approve_event"
    REJECT_EVENT = "reject_event"
    REGISTER_FOR_EVENT = "register_for_event"
    LIST_USERS = "list_users"
    UPDATE_USER = "update_user"
    VIEW_DASHBOARD = "view_dashboard"
    ANALYZE_INTERESTS = "analyze_interests"
    VIEW_RECOMMENDATIONS = "view_recommendations"


ALL_ROLES = frozenset(UserRole)

POLICIES = {
    Operation.CREATE_EVENT: frozenset({UserRole.ORGANIZER, UserRole.ADMIN}),
    Operation.APPROVE_EVENT: frozenset({UserRole.ADMIN}),
    Operation.REJECT_EVENT: frozenset({UserRole.ADMIN}),
    Operation.REGISTER_FOR_EVENT: frozenset({UserRole.STUDENT}),
    Operation.LIST_USERS: frozenset({UserRole.ADMIN}),
    # Self-or-admin is checked by the user service on top of this.
    Operation.UPDATE_USER: ALL_ROLES,
    Operation.VIEW_DASHBOARD: ALL_ROLES,
    Operation.ANALYZE_INTERESTS: ALL_ROLES,
    Operation.VIEW_RECOMMENDATIONS: ALL_ROLES,
}

DENIED_MESSAGES = {
    Operation.CREATE_EVENT: "Organizer or admin access required",
    Operation.APPROVE_EVENT: "Admin access required",
    Operation.REJECT_EVENT: "Admin access required",
    Operation.REGISTER_FOR_EVENT: "Only students can register for events",
    Operation.LIST_USERS: "Admin access required",
}


def is_allowed(user: User, operation: Operation) -> bool:
    return user is not None and user.role in POLICIES[operation]


def authorize(user: User, operation: Operation) -> None:
    if not is_allowed(user, operation):
        raise AuthorizationError(DENIED_MESSAGES.get(operation, "Access denied"))


def issue_token(user: User) -> str:
    return create_access_token(
        identity=str(user.id), additional_claims={"role": user.role.value}
    )


def resolve_current_user() -> User:
    """Verify the bearer token on the current request and load its user."""
    verify_jwt_in_request()
    user_id = get_jwt_identity()
    try:
        user = UserRepository.find_by_id(int(user_id))
    except (TypeError, ValueError):
        user = None
    if not user:
        raise AuthenticationError("Invalid or expired token")
    return user


def optional_current_user() -> Optional[User]:
    """The caller when a valid token is present, otherwise None."""
    try:
        verify_jwt_in_request(optional=True)
        user_id = get_jwt_identity()
    except (JWTExtendedException, PyJWTError):
        return None
    if not user_id:
        return None
    try:
        return UserRepository.find_by_id(int(user_id))
    except (TypeError, ValueError):
        return None


def login_required(operation: Optional[Operation] = None):
    """Authenticate the request and, when given, check ``operation`` once.

    The resolved user is available as ``flask.g.current_user``.
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = resolve_current_user()
            if operation is not None:
                authorize(user, operation)
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def _auth_error(message):
    return jsonify({"message": message}), 401


@jwt.unauthorized_loader
def missing_token_callback(reason):
    return _auth_error("Access token required")


@jwt.invalid_token_loader
def invalid_token_callback(reason):
    return _auth_error("Invalid or expired token")


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return _auth_error("Invalid or expired token")
