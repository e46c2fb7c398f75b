"""Read-only lookups of the mentors and mentees attached to a program."""

from mentorme.models.mentorship import Mentee, Mentor
from mentorme.utils.helpers import check_positive


class MentorService:
    def get_program_mentors(self, program_id: int) -> list[Mentor]:
        """All mentors of the program, ordered by id. Empty when none."""
        check_positive(program_id, "id")
        return (
            Mentor.query.filter_by(institutional_program_id=program_id)
            .order_by(Mentor.id.asc())
            .all()
        )


class MenteeService:
    def get_program_mentees(self, program_id: int) -> list[Mentee]:
        """All mentees of the program, ordered by id. Empty when none."""
        check_positive(program_id, "id")
        return (
            Mentee.query.filter_by(institutional_program_id=program_id)
            .order_by(Mentee.id.asc())
            .all()
        )
