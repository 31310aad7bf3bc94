from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from bilemo.models.customer import ROLE_ADMIN, Customer
from bilemo.services.auth import hash_password, password_looks_hashed

DEFAULT_ADMIN_NAME = "admin"


def ensure_customers_table(engine: Engine) -> None:
    inspector = inspect(engine)
    if not inspector.has_table("customers"):
        raise RuntimeError("Table customers not found. Run `alembic upgrade head` first.")


def _resolve_password_hash(password: str) -> str:
    if password_looks_hashed(password):
        return password
    return hash_password(password)


def upsert_admin_customer(
    db: Session,
    *,
    email: str,
    password: str | None,
    name: str = DEFAULT_ADMIN_NAME,
) -> tuple[Customer, bool]:
    """Cria o customer admin ou promove/atualiza o existente com o mesmo email."""
    email = email.strip().lower()
    if not email:
        raise ValueError("An email is required to create an admin customer.")

    existing = db.query(Customer).filter(Customer.email == email).first()
    if existing:
        roles = list(existing.roles or [])
        if ROLE_ADMIN not in roles:
            roles.append(ROLE_ADMIN)
        existing.roles = roles
        if password:
            existing.password = _resolve_password_hash(password)
        db.commit()
        db.refresh(existing)
        return existing, False

    if not password:
        raise ValueError("A password is required to create a new admin customer.")

    admin = Customer(
        email=email,
        name=name,
        password=_resolve_password_hash(password),
        roles=[ROLE_ADMIN],
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True
