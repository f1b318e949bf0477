from datetime import datetime, timezone
from typing import List, Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from cems.auth import Operation, authorize
from cems.exceptions import (
    InvalidStateError,
    MissingFieldsError,
    NotFoundError,
    ValidationError,
)
from cems.extensions import db
from cems.models import Event, User
from cems.models.enums import EventCategory, EventStatus
from cems.repositories import EventRepository, RegistrationRepository

# Only a pending event can be decided, and a decision is final.
ALLOWED_TRANSITIONS = {
    EventStatus.PENDING: {EventStatus.APPROVED, EventStatus.REJECTED},
}


def parse_timestamp(value, field: str) -> datetime:
    """ISO-8601 string -> aware UTC datetime; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid date format for {field}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_capacity(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Capacity must be a positive integer")
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacity must be a positive integer")
    if capacity <= 0 or capacity != float(value):
        raise ValidationError("Capacity must be a positive integer")
    return capacity


def parse_category(value) -> EventCategory:
    try:
        return EventCategory(str(value).lower())
    except ValueError:
        valid = [c.value for c in EventCategory]
        raise ValidationError(f"Invalid category. Must be one of: {valid}")


def parse_status(value) -> EventStatus:
    try:
        return EventStatus[str(value).upper()]
    except KeyError:
        valid = [s.value for s in EventStatus]
        raise ValidationError(f"Invalid status. Must be one of: {valid}")


class EventService:
    @staticmethod
    def list_events(status=None, category=None, viewer: Optional[User] = None) -> List[dict]:
        status_filter = parse_status(status) if status else None
        category_filter = parse_category(category) if category else None

        rows = EventRepository.list_with_counts(status_filter, category_filter)

        registered_event_ids = set()
        if viewer is not None:
            registered_event_ids = RegistrationRepository.event_ids_for_user(viewer.id)

        events_data = []
        for event, registered_count in rows:
            event_dict = event.to_dict(registered_count=registered_count)
            if viewer is not None:
                event_dict["isRegistered"] = event.id in registered_event_ids
            events_data.append(event_dict)
        return events_data

    @staticmethod
    def get_event(event_id: int) -> dict:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")

        event_dict = event.to_dict(
            registered_count=RegistrationRepository.count_registered(event_id)
        )
        try:
            registered_users = RegistrationRepository.find_registered_users(event_id)
            event_dict["registeredUsers"] = [
                {"id": user.id, "name": user.name, "email": user.email}
                for user in registered_users
            ]
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(
                f"Error fetching registered users for event {event_id}: {str(e)}"
            )
            event_dict["registeredUsers"] = []
        return event_dict

    @staticmethod
    def create_event(organizer_id: int, data: dict) -> Event:
        required_fields = [
            "title",
            "description",
            "startTime",
            "endTime",
            "capacity",
            "category",
        ]
        missing = [
            f for f in required_fields if data.get(f) is None or data.get(f) == ""
        ]
        if missing:
            raise MissingFieldsError(missing)

        for field in ("title", "description"):
            if not isinstance(data[field], str):
                raise ValidationError(f"{field} must be a string")

        venue_id = data.get("venueId") or None
        event = EventRepository.create_event(
            {
                "title": data["title"],
                "description": data["description"],
                "start_time": parse_timestamp(data["startTime"], "startTime"),
                "end_time": parse_timestamp(data["endTime"], "endTime"),
                "capacity": parse_capacity(data["capacity"]),
                "venue_id": venue_id,
                "venue_name": f"Venue {venue_id}" if venue_id else None,
                "category": parse_category(data["category"]),
                "cover_image": data.get("coverImage") or None,
                "organizer_id": organizer_id,
                "status": EventStatus.PENDING,
            }
        )
        current_app.logger.info(
            f"Event {event.id} created by organizer {organizer_id} (pending approval)"
        )
        return event

    @staticmethod
    def approve_event(event_id: int, acting_user: User) -> Event:
        authorize(acting_user, Operation.APPROVE_EVENT)
        return EventService._transition(event_id, EventStatus.APPROVED, acting_user)

    @staticmethod
    def reject_event(event_id: int, acting_user: User) -> Event:
        authorize(acting_user, Operation.REJECT_EVENT)
        return EventService._transition(event_id, EventStatus.REJECTED, acting_user)

    @staticmethod
    def _transition(event_id: int, target: EventStatus, acting_user: User) -> Event:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")

        if event.status == target:
            current_app.logger.info(
                f"Event {event_id} already {target.value}; nothing to change"
            )
            return event

        if target not in ALLOWED_TRANSITIONS.get(event.status, set()):
            current_app.logger.warning(
                f"User {acting_user.id} tried to move event {event_id} "
                f"from {event.status.value} to {target.value}"
            )
            raise InvalidStateError(
                f"Event is {event.status.value} and cannot become {target.value}"
            )

        updated = EventRepository.update_status(event, target)
        current_app.logger.info(
            f"Event {event_id} moved to {target.value} by admin {acting_user.id}"
        )
        return updated
