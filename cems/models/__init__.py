from cems.models.event import Event
from cems.models.registration import Registration
from cems.models.user import User
from cems.models.user_interest import UserInterest
from cems.models.enums import EventCategory, EventStatus, RegistrationStatus, UserRole
