"""
Tests — InstitutionalProgramService, MentorService, MenteeService and the
transaction wrapper, exercised directly against the test database.
"""

from datetime import date

import pytest

from mentorme.core.exceptions import MentorMeError, NotFoundError, ValidationError
from mentorme.models import db
from mentorme.models.program import Document, InstitutionalProgram
from mentorme.models.search import InstitutionalProgramSearchCriteria, Paging
from mentorme.services.institutional_program_service import InstitutionalProgramService
from mentorme.services.mentorship_service import MenteeService, MentorService
from mentorme.utils.helpers import run_in_transaction


@pytest.fixture()
def svc():
    return InstitutionalProgramService()


def _add(svc, **fields):
    entity = {"program_name": "P"}
    entity.update(fields)
    program = run_in_transaction(svc.create, entity)
    return program


# ── get / create ─────────────────────────────────────────────────────────────


def test_get_missing_raises_not_found(svc):
    with pytest.raises(NotFoundError, match="id=12"):
        svc.get(12)


@pytest.mark.parametrize("bad_id", [0, -1, True, "3"])
def test_get_rejects_non_positive_or_non_int(svc, bad_id):
    with pytest.raises(ValidationError):
        svc.get(bad_id)


def test_create_parses_fields(svc):
    program = _add(
        svc,
        program_name="  Mentors United  ",
        institution_id="4",
        start_date="2026-02-01",
        end_date=date(2026, 3, 1),
        duration_in_days=28,
    )
    assert program.id is not None
    assert program.program_name == "Mentors United"
    assert program.institution_id == 4
    assert program.start_date == date(2026, 2, 1)
    assert program.end_date == date(2026, 3, 1)


def test_create_with_documents_keeps_order(svc):
    docs = [Document(name=n, path=f"/tmp/{n}", position=i) for i, n in enumerate(("x", "y", "z"))]
    program = _add(svc, documents=docs)
    db.session.expire_all()
    reloaded = db.session.get(InstitutionalProgram, program.id)
    assert [d.name for d in reloaded.documents] == ["x", "y", "z"]


def test_create_name_too_long(svc):
    with pytest.raises(ValidationError) as exc_info:
        svc.create({"program_name": "x" * 201})
    assert "program_name" in exc_info.value.details


def test_create_rejects_fractional_institution_id(svc):
    with pytest.raises(ValidationError) as exc_info:
        svc.create({"program_name": "P", "institution_id": 2.9})
    assert "institution_id" in exc_info.value.details


def test_documents_must_be_document_rows(svc):
    program = _add(svc)
    with pytest.raises(ValidationError) as exc_info:
        svc.update(program.id, {"documents": [{"name": "a"}]})
    assert "documents" in exc_info.value.details
    with pytest.raises(ValidationError):
        svc.create({"program_name": "P", "documents": ["x"]})


def test_create_none_entity(svc):
    with pytest.raises(ValidationError):
        svc.create(None)


# ── update / delete ──────────────────────────────────────────────────────────


def test_update_only_touches_given_fields(svc):
    program = _add(svc, description="keep me", duration_in_days=5)
    run_in_transaction(svc.update, program.id, {"duration_in_days": "9"})
    assert program.description == "keep me"
    assert program.duration_in_days == 9


def test_update_clears_optional_field_with_empty_value(svc):
    program = _add(svc, institution_id=3)
    run_in_transaction(svc.update, program.id, {"institution_id": ""})
    assert program.institution_id is None


def test_update_date_range_checked_against_stored_values(svc):
    program = _add(svc, start_date="2026-05-01")
    with pytest.raises(ValidationError, match="end_date"):
        run_in_transaction(svc.update, program.id, {"end_date": "2026-04-01"})
    assert db.session.get(InstitutionalProgram, program.id).end_date is None


def test_delete_then_get(svc):
    program = _add(svc)
    run_in_transaction(svc.delete, program.id)
    with pytest.raises(NotFoundError):
        svc.get(program.id)


def test_delete_missing(svc):
    with pytest.raises(NotFoundError):
        run_in_transaction(svc.delete, 77)


# ── search ───────────────────────────────────────────────────────────────────


def test_search_date_window(svc):
    _add(svc, program_name="early", start_date="2026-01-01", end_date="2026-02-01")
    _add(svc, program_name="inside", start_date="2026-03-01", end_date="2026-04-01")
    _add(svc, program_name="late", start_date="2026-03-15", end_date="2026-09-01")

    result = svc.search(
        InstitutionalProgramSearchCriteria(start_date=date(2026, 2, 15), end_date=date(2026, 6, 30)),
        None,
    )
    assert [p.program_name for p in result.entities] == ["inside"]
    assert result.total == 1


def test_search_duration_bounds(svc):
    for days in (5, 15, 25):
        _add(svc, program_name=f"d{days}", duration_in_days=days)
    result = svc.search(
        InstitutionalProgramSearchCriteria(min_duration_in_days=10, max_duration_in_days=20), None
    )
    assert [p.program_name for p in result.entities] == ["d15"]


def test_search_page_beyond_end_is_empty(svc):
    for i in range(3):
        _add(svc, program_name=f"p{i}")
    result = svc.search(None, Paging(page_number=5, page_size=2))
    assert result.entities == []
    assert result.total == 3
    assert result.total_pages == 2


def test_search_empty_database(svc):
    result = svc.search(InstitutionalProgramSearchCriteria(), None)
    assert result.total == 0
    assert result.total_pages == 0
    assert result.to_dict() == {"total": 0, "total_pages": 0, "entities": []}


@pytest.mark.parametrize("kwargs", [
    {"page_size": 0},
    {"page_number": -1},
    {"sort_order": "up"},
])
def test_paging_validation(kwargs):
    with pytest.raises(ValidationError):
        Paging(**kwargs)


# ── mentors / mentees ────────────────────────────────────────────────────────


def test_participant_lookups(svc, make_mentor, make_mentee):
    program = _add(svc)
    make_mentor(program.id, first_name="M1")
    make_mentee(program.id, first_name="E1")
    make_mentee(program.id, first_name="E2")

    assert [m.first_name for m in MentorService().get_program_mentors(program.id)] == ["M1"]
    assert [m.first_name for m in MenteeService().get_program_mentees(program.id)] == ["E1", "E2"]
    assert MentorService().get_program_mentors(program.id + 100) == []


# ── transaction wrapper ──────────────────────────────────────────────────────


def test_failed_unit_of_work_rolls_back(svc):
    def create_then_fail(entity):
        svc.create(entity)
        raise MentorMeError("storage failed")

    with pytest.raises(MentorMeError, match="storage failed"):
        run_in_transaction(create_then_fail, {"program_name": "Doomed"})
    assert InstitutionalProgram.query.count() == 0


def test_unexpected_error_propagates_after_rollback(svc):
    def boom():
        svc.create({"program_name": "Half"})
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run_in_transaction(boom)
    assert InstitutionalProgram.query.count() == 0
