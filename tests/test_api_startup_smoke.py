from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from bilemo.core import config
from bilemo.core.startup_checks import ensure_migrations_applied, validate_database_environment


REQUIRED_ROUTES = {
    "/api/login_check",
    "/api/auth/token",
    "/api/phones",
    "/api/phones/{phone_id}",
    "/api/customers",
    "/api/customers/{customer_id}",
    "/api/users",
    "/api/users/{user_id}",
}


def test_api_startup_and_router_registration(monkeypatch):
    from bilemo import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    with TestClient(main.app) as client:
        response = client.get("/")
        health_response = client.get("/health")
        docs_response = client.get("/api/doc")
        openapi_response = client.get("/openapi.json")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert health_response.json() == {"status": "healthy"}
    assert docs_response.status_code == 200
    assert openapi_response.status_code == 200

    paths = {route.path for route in main.app.routes}
    assert REQUIRED_ROUTES.issubset(paths)
    assert not any(path.startswith("/internal") for path in paths)


def test_sqlite_is_refused_in_production(monkeypatch):
    monkeypatch.setattr(config, "IS_PROD", True)
    monkeypatch.setattr(config, "DATABASE_URL", "sqlite:///./bilemo.db")

    with pytest.raises(RuntimeError, match="SQLite is forbidden"):
        validate_database_environment()


def test_empty_jwt_secret_is_refused_in_production(monkeypatch):
    monkeypatch.setattr(config, "IS_PROD", True)
    monkeypatch.setattr(config, "DATABASE_URL", "postgresql+psycopg://bilemo@db/bilemo")
    monkeypatch.setattr(config, "JWT_SECRET_KEY", "")

    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        validate_database_environment()


def test_development_environment_passes_validation(monkeypatch):
    monkeypatch.setattr(config, "IS_PROD", False)

    validate_database_environment()


def test_migration_check_requires_alembic_config(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "IS_TEST", False)

    with pytest.raises(RuntimeError, match="alembic config not found"):
        ensure_migrations_applied(engine=None, alembic_config_path=Path(tmp_path / "missing.ini"))


def test_migration_check_is_skipped_in_test_environment(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "IS_TEST", True)

    ensure_migrations_applied(engine=None, alembic_config_path=Path(tmp_path / "missing.ini"))
