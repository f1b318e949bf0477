from enum import Enum


class EventStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class EventCategory(Enum):
    MUSIC = "music"
    TECHNOLOGY = "technology"
    SPORTS = "sports"
    ART = "art"
    DANCE = "dance"
    ACADEMIC = "academic"
    SOCIAL = "social"


class RegistrationStatus(Enum):
    REGISTERED = "REGISTERED"
    # Declared for the schema; no operation produces these yet.
    WAITLISTED = "WAITLISTED"
    CANCELLED = "CANCELLED"


class UserRole(Enum):
    STUDENT = "STUDENT"
    ORGANIZER = "ORGANIZER"
    ADMIN = "ADMIN"
