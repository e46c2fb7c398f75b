"""
Shared pytest fixtures for the MentorMe Institutional Programs test suite.

Provides:
    - upload_dir: temporary upload directory (session-scoped)
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - program: Pre-created InstitutionalProgram (via the API)
    - make_mentor / make_mentee: participant row factories
"""

import pytest

from mentorme import create_app
from mentorme.models import db as _db
from mentorme.models.mentorship import Mentee, Mentor


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def upload_dir(tmp_path_factory):
    return str(tmp_path_factory.mktemp("uploads"))


@pytest.fixture(scope="session")
def app(upload_dir):
    """Create the Flask application once per test session."""
    from mentorme.config import TestingConfig

    TestingConfig.SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    TestingConfig.UPLOAD_DIRECTORY = upload_dir
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def program(client):
    """Create and return a test program via the API."""
    res = client.post(
        "/institutionalPrograms",
        data={"program_name": "Test Program", "institution_id": "7"},
        content_type="multipart/form-data",
    )
    assert res.status_code == 201
    return res.get_json()


def _participant_factory(model):
    def make(program_id, first_name="Ada", last_name="Lovelace", email=None):
        row = model(
            first_name=first_name,
            last_name=last_name,
            email=email,
            institutional_program_id=program_id,
        )
        _db.session.add(row)
        _db.session.commit()
        return row
    return make


@pytest.fixture()
def make_mentor():
    return _participant_factory(Mentor)


@pytest.fixture()
def make_mentee():
    return _participant_factory(Mentee)
