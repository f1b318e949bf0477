from typing import List
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from cems.exceptions import (
    CapacityError,
    CemsError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
)
from cems.extensions import db
from cems.models import User
from cems.models.enums import EventStatus
from cems.repositories import EventRepository, RegistrationRepository


class RegistrationService:
    @staticmethod
    def register(event_id: int, user_id: int) -> int:
        """Claim one seat of an approved event for a user.

        Runs as one transaction: the event row is locked, the status and
        duplicate checks are read, and the seat is taken with a conditional
        insert that only succeeds while the registered count is below
        capacity. Returns the new registration id.
        """
        current_app.logger.info(f"Registration attempt: User {user_id} for event {event_id}")
        try:
            event = EventRepository.get_event_for_update(event_id)
            if not event:
                raise NotFoundError("Event not found")

            if event.status != EventStatus.APPROVED:
                raise InvalidStateError("Event is not available for registration")

            if RegistrationRepository.find_by_event_and_user(event_id, user_id):
                current_app.logger.warning(
                    f"User {user_id} already registered for event {event_id}"
                )
                raise ConflictError("Already registered for this event")

            if not RegistrationRepository.insert_if_capacity(event_id, user_id):
                current_app.logger.warning(
                    f"User {user_id} blocked from registering for event {event_id} - event full "
                    f"(capacity={event.capacity})"
                )
                raise CapacityError("Event is at full capacity")

            db.session.commit()
        except CemsError:
            db.session.rollback()
            raise
        except IntegrityError:
            # A concurrent request for the same user committed first
            db.session.rollback()
            current_app.logger.warning(
                f"Duplicate registration for user {user_id}, event {event_id} rejected by the store"
            )
            raise ConflictError("Already registered for this event")
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(
                f"Failed to register user {user_id} for event {event_id}: {str(e)}"
            )
            raise

        registration = RegistrationRepository.find_by_event_and_user(event_id, user_id)
        current_app.logger.info(
            f"Successfully registered user {user_id} for event {event_id} "
            f"(registration {registration.id})"
        )
        return registration.id

    @staticmethod
    def registered_count(event_id: int) -> int:
        return RegistrationRepository.count_registered(event_id)

    @staticmethod
    def registered_users(event_id: int) -> List[User]:
        return RegistrationRepository.find_registered_users(event_id)
