"""
MentorMe Institutional Programs API
Institutional Program Blueprint — CRUD, search, document upload and
mentor/mentee lookups for institutional programs.

Endpoints:
    GET    /institutionalPrograms                    — Search (criteria + paging)
    POST   /institutionalPrograms                    — Create (multipart, files=...)
    GET    /institutionalPrograms/<id>               — Detail
    POST   /institutionalPrograms/<id>               — Update (multipart, files=...)
    DELETE /institutionalPrograms/<id>               — Delete
    GET    /institutionalPrograms/<id>/mentees       — Program mentees
    GET    /institutionalPrograms/<id>/mentors       — Program mentors

``ProgramEndpoint`` holds its collaborators as read-only attributes set once
at construction, so a single instance is shared by all requests. Call
``initialize()`` before serving; ``blueprint()`` builds the Flask blueprint
from ``ROUTES``.
"""

import logging
import os

from flask import Blueprint, jsonify, request

from mentorme.core.exceptions import (
    ConfigurationError,
    MentorMeError,
    NotFoundError,
    ValidationError,
)
from mentorme.models.search import InstitutionalProgramSearchCriteria, Paging
from mentorme.utils.errors import E, api_error
from mentorme.utils.helpers import (
    check_positive,
    parse_date,
    parse_optional_int,
    run_in_transaction,
)
from mentorme.utils.uploads import upload_documents

logger = logging.getLogger(__name__)

URL_PREFIX = "/institutionalPrograms"

_ID = "/<int(signed=True):program_id>"

# (rule, methods, view method) — signed ids so 0 / negatives reach the 400 check
ROUTES = (
    ("", ("GET",), "search_programs"),
    ("", ("POST",), "create_program"),
    (_ID, ("GET",), "get_program"),
    (_ID, ("POST",), "update_program"),
    (_ID, ("DELETE",), "delete_program"),
    (_ID + "/mentees", ("GET",), "list_program_mentees"),
    (_ID + "/mentors", ("GET",), "list_program_mentors"),
)


class ProgramEndpoint:
    """HTTP adapter over the program, mentor and mentee services."""

    def __init__(
        self,
        program_service=None,
        mentor_service=None,
        mentee_service=None,
        upload_directory=None,
        transaction=run_in_transaction,
    ):
        self._program_service = program_service
        self._mentor_service = mentor_service
        self._mentee_service = mentee_service
        self._upload_directory = upload_directory
        self._transaction = transaction

    @property
    def program_service(self):
        return self._program_service

    @property
    def mentor_service(self):
        return self._mentor_service

    @property
    def mentee_service(self):
        return self._mentee_service

    @property
    def upload_directory(self):
        return self._upload_directory

    def initialize(self):
        """Check that every collaborator is configured.

        Creates the upload directory when it does not exist yet.

        Raises:
            ConfigurationError: a service or the upload directory is missing.
        """
        for name in ("program_service", "mentor_service", "mentee_service", "transaction"):
            if getattr(self, f"_{name}") is None:
                raise ConfigurationError(f"{name} must be configured")
        if not self._upload_directory or not str(self._upload_directory).strip():
            raise ConfigurationError("upload_directory must be configured")
        try:
            os.makedirs(self._upload_directory, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                f"upload_directory {self._upload_directory!r} is not usable: {exc}"
            ) from exc
        logger.info("ProgramEndpoint ready, uploads in %s", self._upload_directory)

    # ── Operations ───────────────────────────────────────────────────────

    def get(self, program_id):
        check_positive(program_id, "id")
        return self._program_service.get(program_id)

    def create(self, entity, files=()):
        """Upload ``files``, attach them to ``entity`` and persist it."""
        if entity is None:
            raise ValidationError("entity is required")
        return self._transaction(self._create, dict(entity), files)

    def _create(self, entity, files):
        # documents only ever come from uploaded files
        entity.pop("documents", None)
        entity["documents"] = upload_documents(self._upload_directory, files)
        return self._program_service.create(entity)

    def update(self, program_id, entity, files=()):
        """Update program ``program_id``; uploaded files replace its documents."""
        check_positive(program_id, "id")
        if entity is None:
            raise ValidationError("entity is required")
        entity_id = parse_optional_int(entity.get("id"), "id")
        if entity_id is not None and entity_id != program_id:
            raise ValidationError(
                "id of entity must match the id in the path",
                details={"id": entity_id, "path_id": program_id},
            )
        return self._transaction(self._update, program_id, dict(entity), files)

    def _update(self, program_id, entity, files):
        entity.pop("documents", None)
        documents = upload_documents(self._upload_directory, files)
        if documents:
            entity["documents"] = documents
        return self._program_service.update(program_id, entity)

    def delete(self, program_id):
        check_positive(program_id, "id")
        self._transaction(self._program_service.delete, program_id)

    def search(self, criteria, paging):
        return self._program_service.search(criteria, paging)

    def get_program_mentees(self, program_id):
        check_positive(program_id, "id")
        # make sure the program exists
        self._program_service.get(program_id)
        return self._mentee_service.get_program_mentees(program_id)

    def get_program_mentors(self, program_id):
        check_positive(program_id, "id")
        # make sure the program exists
        self._program_service.get(program_id)
        return self._mentor_service.get_program_mentors(program_id)

    # ── HTTP views ───────────────────────────────────────────────────────

    def search_programs(self):
        result = self.search(_bind_criteria(request.args), _bind_paging(request.args))
        return jsonify(result.to_dict()), 200

    def create_program(self):
        program = self.create(_bind_entity(), _bound_files())
        return jsonify(program.to_dict()), 201

    def get_program(self, program_id):
        return jsonify(self.get(program_id).to_dict()), 200

    def update_program(self, program_id):
        program = self.update(program_id, _bind_entity(), _bound_files())
        return jsonify(program.to_dict()), 200

    def delete_program(self, program_id):
        self.delete(program_id)
        return "", 200

    def list_program_mentees(self, program_id):
        return jsonify([m.to_dict() for m in self.get_program_mentees(program_id)]), 200

    def list_program_mentors(self, program_id):
        return jsonify([m.to_dict() for m in self.get_program_mentors(program_id)]), 200

    def blueprint(self, name="institutional_program"):
        """Build a Flask blueprint serving ``ROUTES`` with this endpoint."""
        bp = Blueprint(name, __name__, url_prefix=URL_PREFIX)
        for rule, methods, view in ROUTES:
            bp.add_url_rule(rule, endpoint=view, view_func=getattr(self, view), methods=list(methods))
        bp.register_error_handler(ValidationError, _handle_validation_error)
        bp.register_error_handler(NotFoundError, _handle_not_found)
        bp.register_error_handler(MentorMeError, _handle_unexpected)
        return bp


# ── Request binding ──────────────────────────────────────────────────────────


def _bind_entity():
    """Entity fields from the multipart form, or a JSON object body.

    Returns None when the request carries no entity at all.
    """
    if request.form:
        return request.form.to_dict()
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return data
    return None


def _bound_files():
    return request.files.getlist("files") + request.files.getlist("files[]")


def _bind_criteria(args):
    return InstitutionalProgramSearchCriteria(
        program_name=(args.get("program_name") or "").strip() or None,
        institution_id=parse_optional_int(args.get("institution_id"), "institution_id"),
        start_date=parse_date(args.get("start_date"), "start_date"),
        end_date=parse_date(args.get("end_date"), "end_date"),
        min_duration_in_days=parse_optional_int(
            args.get("min_duration_in_days"), "min_duration_in_days"
        ),
        max_duration_in_days=parse_optional_int(
            args.get("max_duration_in_days"), "max_duration_in_days"
        ),
    )


def _bind_paging(args):
    """Paging from query args; None when neither page field is given."""
    page_number = parse_optional_int(args.get("page_number"), "page_number")
    page_size = parse_optional_int(args.get("page_size"), "page_size")
    if page_number is None and page_size is None:
        return None
    return Paging(
        page_number=0 if page_number is None else page_number,
        page_size=10 if page_size is None else page_size,
        sort_by=args.get("sort_by") or "id",
        sort_order=(args.get("sort_order") or "asc").lower(),
    )


# ── Error handlers ───────────────────────────────────────────────────────────


def _handle_validation_error(exc):
    logger.info("Rejected request: %s", exc)
    return api_error(E.VALIDATION_INVALID, str(exc), details=exc.details)


def _handle_not_found(exc):
    return api_error(E.NOT_FOUND, str(exc))


def _handle_unexpected(exc):
    logger.error("Program operation failed: %s", exc, exc_info=exc)
    return api_error(E.INTERNAL, str(exc))
