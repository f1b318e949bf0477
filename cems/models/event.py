from cems.extensions import db
from .enums import EventCategory, EventStatus, RegistrationStatus


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    start_time = db.Column(db.TIMESTAMP(timezone=True), nullable=False)
    end_time = db.Column(db.TIMESTAMP(timezone=True), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    venue_id = db.Column(db.String(64), nullable=True)
    venue_name = db.Column(db.String(255), nullable=True)
    category = db.Column(db.Enum(EventCategory), nullable=False)
    cover_image = db.Column(db.String(512), nullable=True)
    status = db.Column(
        db.Enum(EventStatus), nullable=False, default=EventStatus.PENDING
    )
    organizer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )
    updated_at = db.Column(
        db.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    organizer = db.relationship("User", backref=db.backref("events", lazy="dynamic"))

    __table_args__ = (
        db.CheckConstraint("capacity > 0", name="ck_events_capacity_positive"),
    )

    def registered_count(self) -> int:
        from .registration import Registration

        return (
            Registration.query.filter(Registration.event_id == self.id)
            .filter(Registration.status == RegistrationStatus.REGISTERED)
            .count()
        )

    def to_dict(self, registered_count=None):
        if registered_count is None:
            registered_count = self.registered_count()
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "capacity": self.capacity,
            "venueId": self.venue_id,
            "venueName": self.venue_name,
            "category": self.category.value if self.category else None,
            "coverImage": self.cover_image,
            "status": self.status.value if self.status else None,
            "organizerId": self.organizer_id,
            "organizerName": self.organizer.name if self.organizer else None,
            "organizerEmail": self.organizer.email if self.organizer else None,
            "registeredCount": registered_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return (
            f"Event("
            f"id={self.id}, "
            f"title='{self.title}', "
            f"status={self.status}, "
            f"capacity={self.capacity}"
            f")"
        )
