# bilemo/deps.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from bilemo.core.cache import TagAwareCache, cache
from bilemo.core.database import get_db
from bilemo.models.customer import ROLE_ADMIN, Customer
from bilemo.services.auth import decode_access_token

# Swagger "Authorize" (OAuth2 password flow) vai chamar este endpoint:
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

logger = logging.getLogger(__name__)


def get_cache() -> TagAwareCache:
    return cache


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_customer_id(payload: Dict[str, Any]) -> Optional[int]:
    """Extrai o id do customer do claim ``sub`` (string ou int)."""
    raw = payload.get("sub", None)
    if raw is None:
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, str):
        raw = raw.strip()
        if raw.isdigit():
            return int(raw)

    return None


def get_current_customer(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Customer:
    """Lê o bearer token, valida e devolve o customer autenticado."""
    if not token:
        raise _unauthorized("JWT Token not found")

    try:
        payload = decode_access_token(token)
    except ValueError:
        raise _unauthorized("Invalid JWT Token")

    customer_id = _extract_customer_id(payload)
    if customer_id is None:
        raise _unauthorized("Invalid JWT Token")

    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise _unauthorized("Customer not found")

    request.state.principal = customer
    return customer


def _log_access_denied(*, reason: str, principal: Customer, request: Request) -> None:
    endpoint = f"{request.method} {request.url.path}"
    logger.warning(
        "Access denied (%s): customer_id=%s roles=%s endpoint=%s",
        reason,
        getattr(principal, "id", None),
        ",".join(principal.get_roles()) if hasattr(principal, "get_roles") else None,
        endpoint,
    )


def require_role(roles: Iterable[str], *, message: str = "Access denied."):
    allowed = {role.strip().upper() for role in roles}

    def _dependency(
        request: Request,
        principal: Customer = Depends(get_current_customer),
    ) -> Customer:
        if not allowed.intersection(principal.get_roles()):
            _log_access_denied(reason="role_denied", principal=principal, request=request)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
        return principal

    return _dependency


def require_admin(action: str):
    return require_role([ROLE_ADMIN], message=f"you don't have the necessary rights to {action}")


def deny_access(request: Request, principal: Customer, *, reason: str) -> HTTPException:
    _log_access_denied(reason=reason, principal=principal, request=request)
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
