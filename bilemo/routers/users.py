from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bilemo.core.cache import CUSTOMERS_CACHE_TAG, USERS_CACHE_TAG, TagAwareCache, build_cache_key
from bilemo.core.database import commit_or_rollback, get_db
from bilemo.deps import deny_access, get_cache, get_current_customer
from bilemo.models.customer import Customer
from bilemo.models.user import User
from bilemo.schemas.user import UserCreate, UserUpdate
from bilemo.services.memberships import detach_or_delete_user, link_user
from bilemo.services.merge import merge_partial
from bilemo.services.pagination import paginate, resolve_page_params
from bilemo.services.representations import user_to_dict, user_with_links

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Users"])

INVALIDATED_TAGS = [USERS_CACHE_TAG, CUSTOMERS_CACHE_TAG]


def _list_cache_name(principal: Customer) -> str:
    # a lista é por customer: o id entra no nome antes de page/limit
    return f"getAllUser{principal.id}_"


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _ensure_can_manage(request: Request, principal: Customer, user: User, *, admin_bypass: bool) -> None:
    if principal.has_user(user):
        return
    if admin_bypass and principal.is_admin():
        return
    raise deny_access(request, principal, reason="user_not_owned")


def _email_taken(db: Session, email: str, *, exclude_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _email_taken_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": {"email": "This email is already used."}},
    )


@router.get("/users", name="api_get_users_list_by_customer")
def list_users(
    request: Request,
    page: Optional[str] = Query(None, description="The page number of the results to retrieve.", examples=["1"]),
    limit: Optional[str] = Query(None, description="The number of results per page.", examples=["10"]),
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    """Usuários do customer autenticado, paginados."""
    params = resolve_page_params(page, limit)

    def _load_page() -> list[dict]:
        query = (
            db.query(User)
            .join(User.customers)
            .filter(Customer.id == principal.id)
            .order_by(User.id.asc())
        )
        return [user_to_dict(user) for user in paginate(query, params)]

    items = cache_backend.get(
        build_cache_key(_list_cache_name(principal), params.page, params.limit),
        _load_page,
        tags=[USERS_CACHE_TAG],
    )
    return [user_with_links(item, request) for item in items]


@router.get("/users/{user_id}", name="api_get_users_by_customer")
def get_user(
    user_id: int,
    request: Request,
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    user = _get_user_or_404(db, user_id)
    _ensure_can_manage(request, principal, user, admin_bypass=True)
    return user_with_links(user_to_dict(user), request)


@router.post("/users", name="api_create_user", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    request: Request,
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    email = payload.email.lower()
    if _email_taken(db, email):
        return _email_taken_response()

    user = User(email=email, first_name=payload.first_name, last_name=payload.last_name)
    db.add(user)
    db.flush()
    link_user(principal, user)
    commit_or_rollback(db)
    db.refresh(user)
    cache_backend.invalidate_tags(INVALIDATED_TAGS)

    logger.info(
        "user created for customer_id=%s",
        principal.id,
        extra={"entity": "user", "entity_id": user.id},
    )
    return user_with_links(user_to_dict(user), request)


@router.put("/users/{user_id}", name="api_update_user")
def update_user(
    user_id: int,
    payload: UserUpdate,
    request: Request,
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    user = _get_user_or_404(db, user_id)
    _ensure_can_manage(request, principal, user, admin_bypass=True)

    email = payload.email.lower() if payload.email is not None else None
    if email is not None and _email_taken(db, email, exclude_id=user.id):
        return _email_taken_response()

    changes = merge_partial(user, payload, exclude={"email"})
    if email is not None and email != user.email:
        user.email = email
        changes["email"] = email

    commit_or_rollback(db)
    db.refresh(user)
    cache_backend.invalidate_tags(INVALIDATED_TAGS)

    logger.info(
        "user updated fields=%s",
        ",".join(sorted(changes)) or "-",
        extra={"entity": "user", "entity_id": user.id},
    )
    return user_with_links(user_to_dict(user), request)


@router.delete("/users/{user_id}", name="api_delete_user", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    request: Request,
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    user = _get_user_or_404(db, user_id)
    _ensure_can_manage(request, principal, user, admin_bypass=False)

    deleted = detach_or_delete_user(db, principal, user)
    commit_or_rollback(db)
    cache_backend.invalidate_tags(INVALIDATED_TAGS)

    logger.info(
        "user %s from customer_id=%s",
        "deleted" if deleted else "detached",
        principal.id,
        extra={"entity": "user", "entity_id": user_id},
    )
    return None
