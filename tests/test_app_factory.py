"""
Tests — application factory, configuration and health checks.
"""

import logging
import sys

import pytest

from mentorme import create_app
from mentorme.blueprints.institutional_program_bp import ProgramEndpoint
from mentorme.config import ProductionConfig, TestingConfig
from mentorme.core.exceptions import ConfigurationError
from mentorme.middleware.logging_config import JSONFormatter


def test_endpoint_is_initialized_and_registered(app):
    endpoint = app.extensions["program_endpoint"]
    assert isinstance(endpoint, ProgramEndpoint)
    assert endpoint.upload_directory == app.config["UPLOAD_DIRECTORY"]
    rules = {r.rule for r in app.url_map.iter_rules()}
    assert "/institutionalPrograms" in rules
    assert "/institutionalPrograms/<int(signed=True):program_id>/mentors" in rules


def test_missing_upload_directory_fails_startup(monkeypatch):
    monkeypatch.setattr(TestingConfig, "UPLOAD_DIRECTORY", "")
    with pytest.raises(ConfigurationError, match="upload_directory"):
        create_app("testing")


def test_production_requires_database_url(monkeypatch):
    monkeypatch.setattr(ProductionConfig, "SQLALCHEMY_DATABASE_URI", None)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        create_app("production")


def test_health_ready(client):
    res = client.get("/health/ready")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_health_live(client):
    res = client.get("/health/live")
    assert res.status_code == 200
    data = res.get_json()
    assert data["checks"]["database"]["status"] == "ok"
    assert data["checks"]["uploads"]["status"] == "ok"


def test_unknown_route_is_json_404(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.get_json()["error"] == "Not found"


def test_method_not_allowed(client):
    assert client.put("/institutionalPrograms/1").status_code == 405


def test_oversized_upload_is_413(app, client):
    import io

    limit = app.config["MAX_CONTENT_LENGTH"]
    app.config["MAX_CONTENT_LENGTH"] = 64
    try:
        res = client.post(
            "/institutionalPrograms",
            data={"program_name": "Big", "files": [(io.BytesIO(b"x" * 1024), "big.bin")]},
            content_type="multipart/form-data",
        )
    finally:
        app.config["MAX_CONTENT_LENGTH"] = limit
    assert res.status_code == 413
    assert res.get_json()["code"] == "ERR_TOO_LARGE"


def test_json_formatter_includes_request_fields():
    record = logging.LogRecord("mentorme", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    record.program_id = 3
    out = JSONFormatter().format(record)
    assert '"message": "hello x"' in out
    assert '"program_id": 3' in out


def test_json_formatter_skips_unset_extras_and_keeps_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("mentorme", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    out = JSONFormatter().format(record)
    assert '"program_id"' not in out
    assert "RuntimeError: boom" in out


def test_testing_app_logs_plain_text(app):
    (handler,) = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    assert not isinstance(handler.formatter, JSONFormatter)
