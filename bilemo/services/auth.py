from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from bilemo.core.config import JWT_ALGORITHM, JWT_EXPIRE_MINUTES, JWT_SECRET_KEY


# =========================
# PASSWORD (bcrypt direto, sem passlib)
# - evita erro do passlib com bcrypt 5.x
# - evita limite de 72 bytes (faz fallback)
# =========================
def _normalize_password_for_bcrypt(password: str) -> bytes:
    """bcrypt só considera até 72 bytes; acima disso truncamos."""
    pw = (password or "").encode("utf-8")
    if len(pw) <= 72:
        return pw
    return pw[:72]


def hash_password(password: str) -> str:
    pw = _normalize_password_for_bcrypt(password)
    hashed = bcrypt.hashpw(pw, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        pw = _normalize_password_for_bcrypt(plain_password)
        return bcrypt.checkpw(pw, password_hash.encode("utf-8"))
    except ValueError:
        # hash malformado
        return False


def password_looks_hashed(password: str) -> bool:
    return password.startswith(("$2a$", "$2b$", "$2y$"))


# =========================
# JWT HELPERS
# =========================
def create_access_token(
    customer_id: int | str,
    extra: Optional[Dict[str, Any]] = None,
    expires_minutes: int = JWT_EXPIRE_MINUTES,
) -> str:
    """
    "sub" precisa ser STRING (senão dá 'Subject must be a string').
    """
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes)

    payload: Dict[str, Any] = {
        "sub": str(customer_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if extra:
        payload.update(extra)

    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Retorna o payload do JWT ou levanta ValueError se inválido."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid or expired token") from exc


def create_token_for_customer(customer) -> str:
    return create_access_token(
        customer.id,
        extra={
            "username": customer.email,
            "roles": customer.get_roles(),
        },
    )
