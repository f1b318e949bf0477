from cems.repositories.user_repository import UserRepository
from cems.repositories.event_repository import EventRepository
from cems.repositories.registration_repository import RegistrationRepository
from cems.repositories.interest_repository import InterestRepository
