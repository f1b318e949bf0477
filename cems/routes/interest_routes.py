from flask import Blueprint, g, jsonify, request
from cems.auth import Operation, login_required
from cems.services import InterestService

interest_bp = Blueprint("interest", __name__)


@interest_bp.route("/interests/analyze", methods=["POST"])
@login_required(Operation.ANALYZE_INTERESTS)
def analyze_interests():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"message": "No data provided"}), 400

    result = InterestService.analyze(g.current_user.id, data.get("text"))
    return jsonify(result), 200


@interest_bp.route("/interests", methods=["GET"])
@login_required(Operation.ANALYZE_INTERESTS)
def get_interests():
    limit = request.args.get("limit", default=3, type=int)
    return jsonify({"topInterests": InterestService.top_interests(g.current_user.id, limit)}), 200


@interest_bp.route("/interests/recommendations", methods=["GET"])
@login_required(Operation.VIEW_RECOMMENDATIONS)
def get_recommendations():
    return jsonify({"events": InterestService.recommend(g.current_user.id)}), 200
