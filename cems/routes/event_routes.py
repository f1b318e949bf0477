from flask import Blueprint, g, jsonify, request
from cems.auth import Operation, login_required, optional_current_user
from cems.services import EventService, RegistrationService

event_bp = Blueprint("event", __name__)


@event_bp.route("/events", methods=["GET"])
def get_all_events():
    # Anonymous callers get the plain list; a valid token adds isRegistered
    viewer = optional_current_user()
    events = EventService.list_events(
        status=request.args.get("status"),
        category=request.args.get("category"),
        viewer=viewer,
    )
    return jsonify(events), 200


@event_bp.route("/events/<int:event_id>", methods=["GET"])
def get_event(event_id):
    return jsonify(EventService.get_event(event_id)), 200


@event_bp.route("/events", methods=["POST"])
@login_required(Operation.CREATE_EVENT)
def create_event():
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"message": "No data provided"}), 400

    event = EventService.create_event(g.current_user.id, data)
    return jsonify(event.to_dict(registered_count=0)), 201


@event_bp.route("/events/<int:event_id>/register", methods=["POST"])
@login_required(Operation.REGISTER_FOR_EVENT)
def register_for_event(event_id):
    registration_id = RegistrationService.register(event_id, g.current_user.id)
    return (
        jsonify(
            {
                "message": "Successfully registered for event",
                "registrationId": registration_id,
            }
        ),
        200,
    )


@event_bp.route("/events/<int:event_id>/approve", methods=["POST"])
@login_required()
def approve_event(event_id):
    event = EventService.approve_event(event_id, g.current_user)
    return jsonify({"message": "Event approved successfully", "event": event.to_dict()}), 200


@event_bp.route("/events/<int:event_id>/reject", methods=["POST"])
@login_required()
def reject_event(event_id):
    event = EventService.reject_event(event_id, g.current_user)
    return jsonify({"message": "Event rejected successfully", "event": event.to_dict()}), 200
