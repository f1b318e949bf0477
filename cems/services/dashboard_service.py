from datetime import datetime, timezone
from cems.auth import Operation, authorize
from cems.models import Event, User
from cems.models.enums import UserRole
from cems.repositories import EventRepository, RegistrationRepository, UserRepository


class DashboardService:
    @staticmethod
    def stats(user: User) -> dict:
        authorize(user, Operation.VIEW_DASHBOARD)
        stats = {"totalEvents": EventRepository.count()}

        if user.role == UserRole.STUDENT:
            stats["myRegistrations"] = RegistrationRepository.count_for_user(user.id)
            stats["upcomingEvents"] = EventRepository.count_upcoming_approved(
                datetime.now(timezone.utc)
            )
            return stats

        stats["myEvents"] = EventRepository.count_by_organizer(user.id)
        stats["totalAttendees"] = RegistrationRepository.count_for_organizer(user.id)

        if user.role == UserRole.ADMIN:
            stats["totalUsers"] = UserRepository.count()
            stats["eventsByStatus"] = EventRepository.count_grouped_by(Event.status)
            stats["eventsByCategory"] = EventRepository.count_grouped_by(Event.category)
        return stats
