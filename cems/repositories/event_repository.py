from typing import List, Optional, Tuple
from sqlalchemy import and_, func
from cems.extensions import db
from cems.models import Event, Registration
from cems.models.enums import EventCategory, EventStatus, RegistrationStatus


class EventRepository:
    @staticmethod
    def get_events():
        return Event.query

    @staticmethod
    def get_event(event_id: int) -> Optional[Event]:
        return db.session.get(Event, event_id)

    @staticmethod
    def get_event_for_update(event_id: int) -> Optional[Event]:
        """Load an event and lock its row until the transaction ends.

        SQLite has no row locks and ignores FOR UPDATE; it serializes
        writers on the whole database instead.
        """
        return Event.query.filter_by(id=event_id).with_for_update().first()

    @staticmethod
    def list_with_counts(
        status: Optional[EventStatus] = None,
        category: Optional[EventCategory] = None,
    ) -> List[Tuple[Event, int]]:
        """Events newest first, each paired with its live registered count."""
        registered_count = func.count(Registration.id).label("registered_count")
        query = db.session.query(Event, registered_count).outerjoin(
            Registration,
            and_(
                Registration.event_id == Event.id,
                Registration.status == RegistrationStatus.REGISTERED,
            ),
        )
        if status is not None:
            query = query.filter(Event.status == status)
        if category is not None:
            query = query.filter(Event.category == category)
        return (
            query.group_by(Event.id)
            .order_by(Event.created_at.desc(), Event.id.desc())
            .all()
        )

    @staticmethod
    def create_event(attrs: dict) -> Event:
        event = Event(**attrs)
        db.session.add(event)
        db.session.commit()
        return event

    @staticmethod
    def update_status(event: Event, status: EventStatus) -> Event:
        event.status = status
        db.session.commit()
        return event

    @staticmethod
    def count(status: Optional[EventStatus] = None) -> int:
        query = Event.query
        if status is not None:
            query = query.filter(Event.status == status)
        return query.count()

    @staticmethod
    def count_by_organizer(organizer_id: int) -> int:
        return Event.query.filter(Event.organizer_id == organizer_id).count()

    @staticmethod
    def count_upcoming_approved(now) -> int:
        return (
            Event.query.filter(Event.status == EventStatus.APPROVED)
            .filter(Event.start_time > now)
            .count()
        )

    @staticmethod
    def count_grouped_by(column) -> dict:
        rows = db.session.query(column, func.count(Event.id)).group_by(column).all()
        return {key.value: total for key, total in rows}
