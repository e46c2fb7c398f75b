"""
MentorMe Institutional Programs API
Program domain models.

Models:
    - InstitutionalProgram: a mentoring program run by an institution
    - Document: a stored reference to a file uploaded for a program
"""

from datetime import datetime, timezone

from mentorme.models import db


# ── InstitutionalProgram ─────────────────────────────────────────────────────


class InstitutionalProgram(db.Model):
    """
    A mentoring program offered by an institution.
    Mentors and mentees are attached through their own FK columns.
    """

    __tablename__ = "institutional_programs"

    id = db.Column(db.Integer, primary_key=True)
    program_name = db.Column(db.String(200), nullable=False)
    institution_id = db.Column(db.Integer, nullable=True, index=True)
    description = db.Column(db.Text, default="")
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    duration_in_days = db.Column(db.Integer, nullable=True)
    program_image_url = db.Column(db.String(500), nullable=True)

    # Metadata
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ────────────────────────────────────────────────────
    documents = db.relationship(
        "Document", backref="program",
        cascade="all, delete-orphan", order_by="Document.position",
    )
    mentors = db.relationship(
        "Mentor", backref="institutional_program", lazy="dynamic",
        passive_deletes=True, order_by="Mentor.id",
    )
    mentees = db.relationship(
        "Mentee", backref="institutional_program", lazy="dynamic",
        passive_deletes=True, order_by="Mentee.id",
    )

    def to_dict(self):
        """Serialize program (with its documents) to dictionary."""
        return {
            "id": self.id,
            "program_name": self.program_name,
            "institution_id": self.institution_id,
            "description": self.description,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "duration_in_days": self.duration_in_days,
            "program_image_url": self.program_image_url,
            "documents": [d.to_dict() for d in self.documents],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<InstitutionalProgram {self.id}: {self.program_name}>"


# ── Document ─────────────────────────────────────────────────────────────────


class Document(db.Model):
    """
    Uploaded file reference. Written once at upload time, never modified.
    ``position`` keeps the upload order within the owning program.
    """

    __tablename__ = "documents"

    id = db.Column(db.Integer, primary_key=True)
    program_id = db.Column(
        db.Integer,
        db.ForeignKey("institutional_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False, comment="Client-side file name")
    path = db.Column(db.String(1024), nullable=False, comment="Stored file path")
    content_type = db.Column(db.String(255), nullable=True)
    size_bytes = db.Column(db.Integer, default=0)
    position = db.Column(db.Integer, default=0, comment="Upload order within program")

    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "program_id": self.program_id,
            "name": self.name,
            "path": self.path,
            "content_type": self.content_type,
            "size_bytes": self.size_bytes,
            "position": self.position,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Document {self.id}: {self.name}>"
