"""
MentorMe Institutional Programs API
Mentorship participant models.

Models:
    - Mentor: a person mentoring within an institutional program
    - Mentee: a person being mentored within an institutional program

Rows are maintained elsewhere; this service only reads them by program.
"""

from datetime import datetime, timezone

from mentorme.models import db


class _ParticipantMixin:
    """Columns shared by mentors and mentees."""

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(200), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "institutional_program_id": self.institutional_program_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Mentor(_ParticipantMixin, db.Model):
    __tablename__ = "mentors"

    institutional_program_id = db.Column(
        db.Integer,
        db.ForeignKey("institutional_programs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self):
        return f"<Mentor {self.id}: {self.first_name} {self.last_name}>"


class Mentee(_ParticipantMixin, db.Model):
    __tablename__ = "mentees"

    institutional_program_id = db.Column(
        db.Integer,
        db.ForeignKey("institutional_programs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self):
        return f"<Mentee {self.id}: {self.first_name} {self.last_name}>"
