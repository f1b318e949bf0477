from cems.extensions import db
from sqlalchemy.sql import func


class UserInterest(db.Model):
    __tablename__ = "user_interests"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    category = db.Column(db.String(32), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(
        db.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = db.relationship("User", backref=db.backref("interests", lazy="dynamic"))

    # One score per category per user
    __table_args__ = (
        db.UniqueConstraint("user_id", "category", name="uq_user_interest_category"),
    )

    def __repr__(self):
        return f"<UserInterest user_id={self.user_id} {self.category}={self.score}>"
