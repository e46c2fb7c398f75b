"""Shared utility functions used by the blueprint and the service layer.

check_positive:      id guard shared by endpoint and services
parse_date:          ISO or DD.MM.YYYY → date, ValidationError on bad input
parse_optional_int:  query-string / form int parsing
run_in_transaction:  commit-or-rollback wrapper for write operations
"""
import logging
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError

from mentorme.core.exceptions import MentorMeError, ValidationError
from mentorme.models import db

logger = logging.getLogger(__name__)


def check_positive(value, name):
    """Raise ValidationError unless ``value`` is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be positive", details={name: value})
    return value


def parse_date(value, name="date"):
    """Parse a date string (ISO or DD.MM.YYYY) to a date object.

    Returns None for empty input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - DD.MM.YYYY (European format)

    Raises:
        ValidationError: value is non-empty and matches none of the formats.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%d.%m.%Y").date()
    except (ValueError, TypeError):
        raise ValidationError(
            f"Invalid {name}. Use YYYY-MM-DD or DD.MM.YYYY.", details={name: value}
        ) from None


def parse_optional_int(value, name):
    """Parse an int from a form/query value; empty input yields None."""
    if value in (None, ""):
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{name} must be an integer", details={name: value})
    try:
        return int(value)
    except (ValueError, TypeError):
        raise ValidationError(f"{name} must be an integer", details={name: value}) from None


# ── Transaction boundary ─────────────────────────────────────────────────────

def run_in_transaction(func, *args, **kwargs):
    """Run ``func`` as one unit of work on the current SQLAlchemy session.

    Commits when ``func`` returns, rolls back when it raises. Services only
    flush, so everything ``func`` touched is committed or discarded together.

    MentorMe errors propagate unchanged after the rollback. Any other
    SQLAlchemy failure is logged and re-raised as MentorMeError so the
    blueprint renders a 500.
    """
    try:
        result = func(*args, **kwargs)
        db.session.commit()
        return result
    except MentorMeError:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Database error in transaction %s", getattr(func, "__name__", func))
        raise MentorMeError("Database error") from exc
    except Exception:
        db.session.rollback()
        raise
