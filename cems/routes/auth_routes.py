from flask import Blueprint, request, jsonify, make_response
from cems.services import UserService

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/signup", methods=["POST"])
def sign_up():
    user_data = request.get_json(silent=True)
    if not user_data or not isinstance(user_data, dict):
        return jsonify({"message": "No data provided"}), 400

    result = UserService.sign_up(user_data)
    return make_response(
        jsonify({"message": "User created successfully", **result}), 201
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    user_data = request.get_json(silent=True)
    if not user_data or not isinstance(user_data, dict):
        return jsonify({"message": "No data provided"}), 400

    result = UserService.sign_in(user_data.get("email"), user_data.get("password"))
    return jsonify({"message": "Login successful", **result}), 200
