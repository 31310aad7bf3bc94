# bilemo/routers/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from bilemo.core.database import get_db
from bilemo.models.customer import Customer
from bilemo.schemas.auth import LoginPayload, TokenResponse
from bilemo.services.auth import create_token_for_customer, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Auth"])


def _authenticate(db: Session, username: str, password: str) -> Customer | None:
    customer = db.query(Customer).filter(Customer.email == username.strip().lower()).first()
    if not customer or not verify_password(password, customer.password):
        logger.warning("login failed username=%s", username)
        return None
    return customer


@router.post("/login_check", response_model=TokenResponse)
def login_check(payload: LoginPayload, db: Session = Depends(get_db)):
    customer = _authenticate(db, payload.username, payload.password)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("login success customer_id=%s", customer.id)
    return {"token": create_token_for_customer(customer)}


@router.post("/auth/token")
def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """Endpoint usado pelo botão Authorize do Swagger UI.

    Ele manda form-data com campos: username e password.
    """
    customer = _authenticate(db, form_data.username, form_data.password)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"access_token": create_token_for_customer(customer), "token_type": "bearer"}
