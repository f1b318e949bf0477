from flask import Blueprint, g, jsonify, request
from cems.auth import Operation, login_required
from cems.services import UserService

user_bp = Blueprint("user", __name__)


@user_bp.route("/users", methods=["GET"])
@login_required(Operation.LIST_USERS)
def get_all_users():
    """Get all users (admin only)"""
    return jsonify(UserService.list_users(g.current_user)), 200


@user_bp.route("/users/<int:user_id>", methods=["PUT"])
@login_required(Operation.UPDATE_USER)
def update_user(user_id):
    """Update a profile (self or admin)"""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"message": "No data provided"}), 400

    return jsonify(UserService.update_user(user_id, data, g.current_user)), 200


@user_bp.route("/users/me", methods=["GET"])
@login_required()
def validate_token():
    return jsonify({"valid": True, "user": g.current_user.to_dict()}), 200
