from cems.extensions import db
from .enums import RegistrationStatus


class Registration(db.Model):
    __tablename__ = "event_registrations"

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey("events.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    status = db.Column(
        db.Enum(RegistrationStatus),
        nullable=False,
        default=RegistrationStatus.REGISTERED,
    )
    registered_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    event = db.relationship("Event", backref=db.backref("registrations", lazy="dynamic"))
    user = db.relationship("User", backref=db.backref("registrations", lazy="dynamic"))

    # One registration per user per event
    __table_args__ = (
        db.UniqueConstraint("event_id", "user_id", name="uq_event_user_registration"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "status": self.status.value if self.status else None,
            "registered_at": (
                self.registered_at.isoformat() if self.registered_at else None
            ),
        }

    def __repr__(self):
        return (
            f"Registration("
            f"id={self.id}, "
            f"event_id={self.event_id}, "
            f"user_id={self.user_id}, "
            f"status={self.status}"
            f")"
        )
