import sys
import os

sys.path.append(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)  # relative imports

import argparse
from datetime import datetime, timedelta, timezone
from werkzeug.security import generate_password_hash
from cems import create_app, db
from cems.exceptions import CemsError
from cems.models import Event, User
from cems.models.enums import EventCategory, EventStatus, UserRole
from cems.services.registration_service import RegistrationService
from create_admin import create_admin_user

SAMPLE_USERS = [
    ("John Student", "john@student.edu", "student123", UserRole.STUDENT),
    ("Priya Student", "priya@student.edu", "student123", UserRole.STUDENT),
    ("Sarah Organizer", "sarah@club.edu", "organizer123", UserRole.ORGANIZER),
    ("Mike Organizer", "mike@sports.edu", "organizer123", UserRole.ORGANIZER),
]

# (title, description, days from now, duration in hours, capacity, venue, category, status)
SAMPLE_EVENTS = [
    (
        "Annual Music Festival",
        "Join us for a night of amazing music performances from our talented students. "
        "Featuring various genres and special guest performances.",
        10, 4, 200, "AUD-001", EventCategory.MUSIC, EventStatus.APPROVED,
    ),
    (
        "Tech Hackathon",
        "24-hour coding competition where students can showcase their programming skills "
        "and build innovative projects.",
        15, 24, 100, "CS-101", EventCategory.TECHNOLOGY, EventStatus.APPROVED,
    ),
    (
        "Basketball Tournament Finals",
        "Championship game of the inter-college basketball tournament. Come support your team!",
        5, 2, 500, "GYM-001", EventCategory.SPORTS, EventStatus.APPROVED,
    ),
    (
        "Art Exhibition: Modern Perspectives",
        "Showcasing contemporary art pieces created by our art department students.",
        20, 54, 150, "ART-GAL", EventCategory.ART, EventStatus.PENDING,
    ),
    (
        "Dance Workshop: Contemporary Moves",
        "Learn contemporary dance techniques from professional choreographers. All skill levels welcome.",
        7, 2, 50, "DANCE-01", EventCategory.DANCE, EventStatus.APPROVED,
    ),
    (
        "AI & Machine Learning Seminar",
        "Expert talk on the latest developments in artificial intelligence and machine learning applications.",
        13, 2, 80, "LT-201", EventCategory.ACADEMIC, EventStatus.APPROVED,
    ),
]


def create_sample_users():
    users = []
    for name, email, password, role in SAMPLE_USERS:
        user = User.query.filter_by(email=email).first()
        if not user:
            user = User(
                name=name,
                email=email,
                password=generate_password_hash(password),
                role=role,
            )
            db.session.add(user)
        users.append(user)
    db.session.commit()
    print(f"Ensured {len(users)} sample users")
    return users


def create_sample_events(organizers):
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    events = []
    for index, (title, description, days, hours, capacity, venue, category, status) in enumerate(SAMPLE_EVENTS):
        event = Event.query.filter_by(title=title).first()
        if not event:
            starts_at = now + timedelta(days=days)
            event = Event(
                title=title,
                description=description,
                start_time=starts_at,
                end_time=starts_at + timedelta(hours=hours),
                capacity=capacity,
                venue_id=venue,
                venue_name=f"Venue {venue}",
                category=category,
                status=status,
                organizer_id=organizers[index % len(organizers)].id,
            )
            db.session.add(event)
            print(f"Inserted event: {title}")
        events.append(event)
    db.session.commit()
    return events


def create_sample_registrations(students, events):
    """Register every student for the first two approved events."""
    approved = [event for event in events if event.status == EventStatus.APPROVED][:2]
    for student in students:
        for event in approved:
            try:
                RegistrationService.register(event.id, student.id)
                print(f"Registered {student.email} for '{event.title}'")
            except CemsError as e:
                print(f"Skipped {student.email} for '{event.title}': {e.message}")


def main():
    parser = argparse.ArgumentParser(description="Seed the database with demo data")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        print(f"INFO: Connecting to database: {app.config['SQLALCHEMY_DATABASE_URI']}")
        if args.reset:
            db.drop_all()
        db.create_all()
        create_admin_user()

        users = create_sample_users()
        students = [u for u in users if u.role == UserRole.STUDENT]
        organizers = [u for u in users if u.role == UserRole.ORGANIZER]

        events = create_sample_events(organizers)
        create_sample_registrations(students, events)
        print("Database seeding completed!")


if __name__ == "__main__":
    main()
