"""
MentorMe exception hierarchy.

Services and the upload helper raise these; the program blueprint registers
error handlers against them once and gets consistent HTTP status codes.

    MentorMeError (base, HTTP 500)
    ├── ValidationError     (HTTP 400)
    ├── NotFoundError       (HTTP 404)
    └── ConfigurationError  (startup failure, never rendered per request)

Usage:
    from mentorme.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="InstitutionalProgram", resource_id=42)
    raise ValidationError("program_name is required", details={"program_name": "required"})
"""


class MentorMeError(Exception):
    """Raised when an operation fails for any reason not covered by a subclass.

    Maps to HTTP 500 in blueprint error handlers.
    """


class NotFoundError(MentorMeError):
    """Raised when a requested entity does not exist.

    Args:
        resource: Human-readable entity name (e.g. "InstitutionalProgram").
        resource_id: The PK that was looked up.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(MentorMeError):
    """Raised when an argument is missing, malformed or inconsistent.

    Covers both shallow request checks (positive ids, id mismatch) and
    field-level entity validation in the service layer. Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown. Keys are field names;
                 values are error descriptions.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(MentorMeError):
    """Raised at startup when a required collaborator or setting is missing."""
