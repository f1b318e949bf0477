from cems.services.user_service import UserService
from cems.services.event_service import EventService
from cems.services.registration_service import RegistrationService
from cems.services.interest_service import InterestService
from cems.services.dashboard_service import DashboardService
