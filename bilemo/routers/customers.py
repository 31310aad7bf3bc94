from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, selectinload

from bilemo.core.cache import CUSTOMERS_CACHE_TAG, USERS_CACHE_TAG, TagAwareCache, build_cache_key
from bilemo.core.database import commit_or_rollback, get_db
from bilemo.deps import get_cache, get_current_customer, require_admin
from bilemo.models.customer import Customer
from bilemo.models.user import User
from bilemo.schemas.customer import CustomerCreate, CustomerUpdate
from bilemo.services.auth import hash_password
from bilemo.services.memberships import link_user
from bilemo.services.merge import merge_partial
from bilemo.services.pagination import paginate, resolve_page_params
from bilemo.services.representations import customer_to_dict, customer_with_links

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Customers"])

LIST_CACHE_NAME = "getAllCustomer"
# o payload de customer embute os usuários, então qualquer escrita aqui derruba os dois
INVALIDATED_TAGS = [CUSTOMERS_CACHE_TAG, USERS_CACHE_TAG]


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = (
        db.query(Customer)
        .options(selectinload(Customer.users))
        .filter(Customer.id == customer_id)
        .first()
    )
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


def _email_taken(db: Session, email: str, *, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Customer.id).filter(Customer.email == email)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    return query.first() is not None


def _email_taken_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": {"email": "This email is already used."}},
    )


@router.get("/customers", name="api_list_customer")
def list_customers(
    request: Request,
    page: Optional[str] = Query(None, description="Requested result page", examples=["1"]),
    limit: Optional[str] = Query(None, description="Number of results per page", examples=["10"]),
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    params = resolve_page_params(page, limit)

    def _load_page() -> list[dict]:
        query = db.query(Customer).options(selectinload(Customer.users)).order_by(Customer.id.asc())
        return [customer_to_dict(customer) for customer in paginate(query, params)]

    items = cache_backend.get(
        build_cache_key(LIST_CACHE_NAME, params.page, params.limit),
        _load_page,
        tags=[CUSTOMERS_CACHE_TAG],
    )
    is_admin = principal.is_admin()
    return [customer_with_links(item, request, is_admin=is_admin) for item in items]


@router.get("/customers/{customer_id}", name="api_detail_customer")
def get_customer(
    customer_id: int,
    request: Request,
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    customer = _get_customer_or_404(db, customer_id)
    return customer_with_links(customer_to_dict(customer), request, is_admin=principal.is_admin())


@router.post("/customers", name="api_create_customer", status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    request: Request,
    principal: Customer = Depends(require_admin("create a customer")),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    email = payload.email.lower()
    if _email_taken(db, email):
        return _email_taken_response()

    user = None
    if payload.user_id is not None:
        user = db.query(User).filter(User.id == payload.user_id).first()
        if user is None:
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "user is not found"})

    customer = Customer(
        name=payload.name,
        email=email,
        password=hash_password(payload.password),
        roles=payload.roles,
    )
    db.add(customer)
    db.flush()
    if user is not None:
        link_user(customer, user)
    commit_or_rollback(db)
    db.refresh(customer)
    cache_backend.invalidate_tags(INVALIDATED_TAGS)

    logger.info(
        "customer created by customer_id=%s",
        principal.id,
        extra={"entity": "customer", "entity_id": customer.id},
    )
    return customer_with_links(customer_to_dict(customer), request, is_admin=True)


@router.api_route(
    "/customers/{customer_id}",
    methods=["PUT", "PATCH"],
    name="api_update_customer",
    status_code=status.HTTP_204_NO_CONTENT,
)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    principal: Customer = Depends(require_admin("update a customer")),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    customer = _get_customer_or_404(db, customer_id)

    email = payload.email.lower() if payload.email is not None else None
    if email is not None and _email_taken(db, email, exclude_id=customer.id):
        return _email_taken_response()

    user = None
    if payload.user_id is not None:
        user = db.query(User).filter(User.id == payload.user_id).first()
        if user is None:
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "User not found"})

    changes = merge_partial(customer, payload, exclude={"email", "password", "user_id"})
    if email is not None and email != customer.email:
        customer.email = email
        changes["email"] = email
    if payload.password is not None:
        customer.password = hash_password(payload.password)
        changes["password"] = "***"
    if user is not None and link_user(customer, user):
        changes["users"] = user.id

    commit_or_rollback(db)
    cache_backend.invalidate_tags(INVALIDATED_TAGS)

    logger.info(
        "customer updated fields=%s",
        ",".join(sorted(changes)) or "-",
        extra={"entity": "customer", "entity_id": customer.id},
    )
    return None


@router.delete("/customers/{customer_id}", name="api_delete_customer", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    principal: Customer = Depends(require_admin("delete a customer")),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    customer = _get_customer_or_404(db, customer_id)
    if customer.id == principal.id:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "You cannot delete the customer you are logged in with"},
        )

    # as arestas de user_customer saem junto com a linha
    db.delete(customer)
    commit_or_rollback(db)
    cache_backend.invalidate_tags(INVALIDATED_TAGS)

    logger.info("customer deleted", extra={"entity": "customer", "entity_id": customer_id})
    return None
