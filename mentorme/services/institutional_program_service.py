"""Institutional program service layer — validation, persistence and search.

Transaction policy: methods only ``flush()``. The caller owns the unit of
work (see ``mentorme.utils.helpers.run_in_transaction``), so documents and
program rows are committed or rolled back together.

Entities arrive as plain dicts (bound from the multipart form or JSON body).
A ``documents`` key, when present, holds unsaved ``Document`` rows.
"""
import logging
import math
from typing import Any

from mentorme.core.exceptions import NotFoundError, ValidationError
from mentorme.models import db
from mentorme.models.program import Document, InstitutionalProgram
from mentorme.models.search import InstitutionalProgramSearchCriteria, Paging, SearchResult
from mentorme.utils.helpers import check_positive, parse_date, parse_optional_int

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id", "program_name", "institution_id", "start_date", "end_date",
    "duration_in_days", "created_at", "updated_at",
}

_TEXT_LIMITS = {
    "program_name": 200,
    "program_image_url": 500,
}


def _validate_length(value: str, max_len: int, field_name: str) -> str | None:
    """Return error message if value exceeds max_len, else None."""
    if value and len(value) > max_len:
        return f"{field_name} exceeds maximum length of {max_len} characters"
    return None


def _clean_fields(entity: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Turn a raw entity dict into model column values.

    With ``partial=True`` only keys present in ``entity`` are returned, so an
    update leaves omitted columns untouched.

    Raises:
        ValidationError: one or more fields are invalid; ``details`` lists
            every failing field.
    """
    errors: dict[str, str] = {}
    fields: dict[str, Any] = {}

    def present(key):
        return key in entity or not partial

    if present("program_name"):
        name = str(entity.get("program_name") or "").strip()
        if not name:
            errors["program_name"] = "program_name is required"
        elif err := _validate_length(name, _TEXT_LIMITS["program_name"], "program_name"):
            errors["program_name"] = err
        fields["program_name"] = name

    if present("description"):
        fields["description"] = str(entity.get("description") or "")

    if present("program_image_url"):
        url = str(entity.get("program_image_url") or "").strip() or None
        if err := _validate_length(url, _TEXT_LIMITS["program_image_url"], "program_image_url"):
            errors["program_image_url"] = err
        fields["program_image_url"] = url

    for key in ("institution_id", "duration_in_days"):
        if not present(key):
            continue
        try:
            fields[key] = parse_optional_int(entity.get(key), key)
        except ValidationError as exc:
            errors[key] = str(exc)
            continue
        if key == "institution_id" and fields[key] is not None and fields[key] <= 0:
            errors[key] = "institution_id must be positive"
        if key == "duration_in_days" and fields[key] is not None and fields[key] < 0:
            errors[key] = "duration_in_days must not be negative"

    for key in ("start_date", "end_date"):
        if not present(key):
            continue
        try:
            fields[key] = parse_date(entity.get(key), key)
        except ValidationError as exc:
            errors[key] = str(exc)

    if errors:
        first = next(iter(errors.values()))
        raise ValidationError(first, details=errors)
    return fields


def _check_date_range(program: InstitutionalProgram) -> None:
    if program.start_date and program.end_date and program.end_date < program.start_date:
        raise ValidationError(
            "end_date must not be before start_date",
            details={"end_date": "must not be before start_date"},
        )


def _documents(entity: dict[str, Any]) -> list[Document]:
    documents = list(entity.get("documents") or [])
    if not all(isinstance(doc, Document) for doc in documents):
        raise ValidationError(
            "documents must be uploaded as files",
            details={"documents": "must be uploaded as files"},
        )
    return documents


class InstitutionalProgramService:
    """CRUD and search over ``InstitutionalProgram`` rows."""

    def get(self, program_id: int) -> InstitutionalProgram:
        """Return the program or raise NotFoundError."""
        check_positive(program_id, "id")
        program = db.session.get(InstitutionalProgram, program_id)
        if program is None:
            raise NotFoundError(resource="InstitutionalProgram", resource_id=program_id)
        return program

    def create(self, entity: dict[str, Any]) -> InstitutionalProgram:
        """Validate and add a new program together with its documents."""
        if entity is None:
            raise ValidationError("entity is required")
        fields = _clean_fields(entity, partial=False)
        program = InstitutionalProgram(**fields)
        _check_date_range(program)
        program.documents = _documents(entity)

        db.session.add(program)
        db.session.flush()
        logger.info("InstitutionalProgram created id=%s documents=%d",
                    program.id, len(program.documents),
                    extra={"program_id": program.id})
        return program

    def update(self, program_id: int, entity: dict[str, Any]) -> InstitutionalProgram:
        """Apply the fields present in ``entity`` to an existing program.

        A ``documents`` key replaces the program's document list.
        """
        check_positive(program_id, "id")
        if entity is None:
            raise ValidationError("entity is required")
        program = self.get(program_id)
        fields = _clean_fields(entity, partial=True)
        for key, value in fields.items():
            setattr(program, key, value)
        _check_date_range(program)
        if "documents" in entity:
            program.documents = _documents(entity)

        db.session.flush()
        logger.info("InstitutionalProgram updated id=%s fields=%s",
                    program.id, sorted(fields), extra={"program_id": program.id})
        return program

    def delete(self, program_id: int) -> None:
        """Remove a program; its documents go with it."""
        program = self.get(program_id)
        db.session.delete(program)
        db.session.flush()
        logger.info("InstitutionalProgram deleted id=%s", program_id,
                    extra={"program_id": program_id})

    def search(
        self,
        criteria: InstitutionalProgramSearchCriteria | None,
        paging: Paging | None = None,
    ) -> SearchResult:
        """Filter programs by ``criteria`` and slice by ``paging``.

        ``total`` is the unpaged match count. Without paging every match is
        returned as a single page.
        """
        criteria = criteria or InstitutionalProgramSearchCriteria()
        query = InstitutionalProgram.query

        if criteria.program_name:
            query = query.filter(
                InstitutionalProgram.program_name.ilike(f"%{criteria.program_name}%")
            )
        if criteria.institution_id is not None:
            query = query.filter(InstitutionalProgram.institution_id == criteria.institution_id)
        if criteria.start_date is not None:
            query = query.filter(InstitutionalProgram.start_date >= criteria.start_date)
        if criteria.end_date is not None:
            query = query.filter(InstitutionalProgram.end_date <= criteria.end_date)
        if criteria.min_duration_in_days is not None:
            query = query.filter(
                InstitutionalProgram.duration_in_days >= criteria.min_duration_in_days
            )
        if criteria.max_duration_in_days is not None:
            query = query.filter(
                InstitutionalProgram.duration_in_days <= criteria.max_duration_in_days
            )

        total = query.count()

        if paging is None:
            items = query.order_by(InstitutionalProgram.id.asc()).all()
            return SearchResult(total=total, total_pages=1 if total else 0, entities=items)

        if paging.sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Invalid sort_by: '{paging.sort_by}'. Allowed: {sorted(SORTABLE_FIELDS)}",
                details={"sort_by": paging.sort_by},
            )
        column = getattr(InstitutionalProgram, paging.sort_by)
        order = column.desc() if paging.sort_order == "desc" else column.asc()
        # id tiebreaker keeps pages stable when sort values repeat
        items = (
            query.order_by(order, InstitutionalProgram.id.asc())
            .offset(paging.offset)
            .limit(paging.page_size)
            .all()
        )
        return SearchResult(
            total=total,
            total_pages=math.ceil(total / paging.page_size),
            entities=items,
        )
