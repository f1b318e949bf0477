from typing import List, Optional, Set
from sqlalchemy import func, insert, literal, select
from cems.extensions import db
from cems.models import Event, Registration, User
from cems.models.enums import RegistrationStatus


class RegistrationRepository:
    @staticmethod
    def find_by_event_and_user(event_id: int, user_id: int) -> Optional[Registration]:
        """Find a registration by event_id and user_id"""
        return Registration.query.filter_by(event_id=event_id, user_id=user_id).first()

    @staticmethod
    def count_registered(event_id: int) -> int:
        """Live count of REGISTERED rows for an event."""
        return (
            Registration.query.filter(Registration.event_id == event_id)
            .filter(Registration.status == RegistrationStatus.REGISTERED)
            .count()
        )

    @staticmethod
    def insert_if_capacity(event_id: int, user_id: int) -> bool:
        """Insert a REGISTERED row only while the event has a free seat.

        The seat count and the insert run as a single statement, so no other
        writer can take the last seat between the check and the write.
        Returns False when the event is already full. Does not commit.
        """
        seats_taken = (
            select(func.count(Registration.id))
            .where(
                Registration.event_id == event_id,
                Registration.status == RegistrationStatus.REGISTERED,
            )
            .correlate(None)
            .scalar_subquery()
        )
        capacity = (
            select(Event.capacity)
            .where(Event.id == event_id)
            .correlate(None)
            .scalar_subquery()
        )
        status_type = Registration.__table__.c.status.type

        stmt = insert(Registration.__table__).from_select(
            ["event_id", "user_id", "status"],
            select(
                literal(event_id),
                literal(user_id),
                literal(RegistrationStatus.REGISTERED, status_type),
            ).where(seats_taken < capacity),
        )
        result = db.session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    def find_registered_users(event_id: int) -> List[User]:
        return (
            db.session.query(User)
            .join(Registration, User.id == Registration.user_id)
            .filter(
                Registration.event_id == event_id,
                Registration.status == RegistrationStatus.REGISTERED,
            )
            .order_by(Registration.registered_at.asc(), Registration.id.asc())
            .all()
        )

    @staticmethod
    def event_ids_for_user(user_id: int) -> Set[int]:
        rows = (
            db.session.query(Registration.event_id)
            .filter(Registration.user_id == user_id)
            .filter(Registration.status == RegistrationStatus.REGISTERED)
            .all()
        )
        return {event_id for (event_id,) in rows}

    @staticmethod
    def count_for_user(user_id: int) -> int:
        return (
            Registration.query.filter(Registration.user_id == user_id)
            .filter(Registration.status == RegistrationStatus.REGISTERED)
            .count()
        )

    @staticmethod
    def count_for_organizer(organizer_id: int) -> int:
        """Registered seats across every event the organizer owns."""
        return (
            db.session.query(Registration)
            .join(Event, Registration.event_id == Event.id)
            .filter(
                Event.organizer_id == organizer_id,
                Registration.status == RegistrationStatus.REGISTERED,
            )
            .count()
        )
