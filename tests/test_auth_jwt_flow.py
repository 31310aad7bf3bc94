from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bilemo.core.cache import InMemoryTagAwareCache
from bilemo.core.config import JWT_ALGORITHM, JWT_SECRET_KEY
from bilemo.core.database import Base, get_db
from bilemo.deps import get_cache
from bilemo.models.customer import Customer
from bilemo.services.auth import create_access_token, decode_access_token, hash_password
from tests.fixtures_data import ADMIN_CUSTOMER, PLAIN_CUSTOMER


def _build_client(monkeypatch):
    from bilemo import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    db.add(Customer(**{**ADMIN_CUSTOMER, "password": hash_password(ADMIN_CUSTOMER["password"])}))
    db.add(Customer(**{**PLAIN_CUSTOMER, "password": hash_password(PLAIN_CUSTOMER["password"])}))
    db.commit()

    cache = InMemoryTagAwareCache()
    monkeypatch.setattr(main.app, "dependency_overrides", {get_db: lambda: db, get_cache: lambda: cache})
    return main.app


def _login(client: TestClient, username: str, password: str):
    return client.post("/api/login_check", json={"username": username, "password": password})


def test_login_check_returns_jwt_with_customer_claims(monkeypatch):
    app = _build_client(monkeypatch)

    with TestClient(app) as client:
        response = _login(client, "orange@bilemo.com", "password")

    assert response.status_code == 200
    claims = decode_access_token(response.json()["token"])
    assert claims["sub"] == "2"
    assert claims["username"] == "orange@bilemo.com"
    assert claims["roles"] == ["ROLE_CUSTOMER"]
    assert claims["exp"] > claims["iat"]


def test_login_check_rejects_bad_credentials(monkeypatch):
    app = _build_client(monkeypatch)

    with TestClient(app) as client:
        wrong_password = _login(client, "orange@bilemo.com", "nope")
        unknown = _login(client, "ghost@bilemo.com", "password")

    assert wrong_password.status_code == 401
    assert wrong_password.json()["detail"] == "Invalid credentials."
    assert unknown.status_code == 401


def test_bearer_token_grants_access_to_protected_routes(monkeypatch):
    app = _build_client(monkeypatch)

    with TestClient(app) as client:
        token = _login(client, "admin@bilemo.com", "password").json()["token"]
        headers = {"Authorization": f"Bearer {token}"}
        phones = client.get("/api/phones", headers=headers)
        created = client.post(
            "/api/customers",
            headers=headers,
            json={"name": "SFR Business", "email": "sfr@bilemo.com", "password": "password"},
        )

    assert phones.status_code == 200
    assert phones.json() == []
    assert phones.headers["X-Request-ID"]
    assert created.status_code == 201


def test_oauth2_form_endpoint_issues_bearer_token(monkeypatch):
    app = _build_client(monkeypatch)

    with TestClient(app) as client:
        response = client.post(
            "/api/auth/token",
            data={"username": "admin@bilemo.com", "password": "password"},
        )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert decode_access_token(body["access_token"])["roles"] == ["ROLE_ADMIN", "ROLE_CUSTOMER"]


def test_missing_invalid_and_expired_tokens_are_rejected(monkeypatch):
    app = _build_client(monkeypatch)
    expired = jwt.encode(
        {
            "sub": "1",
            "iat": int((datetime.now(timezone.utc) - timedelta(hours=2)).timestamp()),
            "exp": int((datetime.now(timezone.utc) - timedelta(hours=1)).timestamp()),
        },
        JWT_SECRET_KEY,
        algorithm=JWT_ALGORITHM,
    )

    with TestClient(app) as client:
        missing = client.get("/api/phones")
        garbage = client.get("/api/phones", headers={"Authorization": "Bearer not-a-jwt"})
        expired_response = client.get("/api/phones", headers={"Authorization": f"Bearer {expired}"})
        orphan = client.get(
            "/api/phones",
            headers={"Authorization": f"Bearer {create_access_token(999)}"},
        )

    assert missing.status_code == 401
    assert missing.json()["detail"] == "JWT Token not found"
    assert missing.headers["WWW-Authenticate"] == "Bearer"
    assert garbage.status_code == 401
    assert garbage.json()["detail"] == "Invalid JWT Token"
    assert expired_response.status_code == 401
    assert orphan.status_code == 401
    assert orphan.json()["detail"] == "Customer not found"
