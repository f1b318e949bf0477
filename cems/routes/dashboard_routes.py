from flask import Blueprint, g, jsonify
from cems.auth import Operation, login_required
from cems.services import DashboardService

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/dashboard/stats", methods=["GET"])
@login_required(Operation.VIEW_DASHBOARD)
def get_stats():
    """Counters for the caller's dashboard; admins also get aggregates"""
    return jsonify(DashboardService.stats(g.current_user)), 200
