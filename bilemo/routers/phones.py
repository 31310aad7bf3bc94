from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from bilemo.core.cache import PHONES_CACHE_TAG, TagAwareCache, build_cache_key
from bilemo.core.database import commit_or_rollback, get_db
from bilemo.deps import get_cache, get_current_customer, require_admin
from bilemo.models.customer import Customer
from bilemo.models.phone import Phone
from bilemo.schemas.phone import PhoneCreate, PhoneUpdate
from bilemo.services.merge import merge_partial
from bilemo.services.pagination import paginate, resolve_page_params
from bilemo.services.representations import phone_to_dict, phone_with_links

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Phones"])

LIST_CACHE_NAME = "getAllPhone"


def _get_phone_or_404(db: Session, phone_id: int) -> Phone:
    phone = db.query(Phone).filter(Phone.id == phone_id).first()
    if not phone:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Phone not found")
    return phone


@router.get("/phones", name="api_list_phone")
def list_phones(
    request: Request,
    page: Optional[str] = Query(None, description="Requested result page", examples=["1"]),
    limit: Optional[str] = Query(None, description="Number of results per page", examples=["10"]),
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    """Lista paginada do catálogo (cacheada por página/limite)."""
    params = resolve_page_params(page, limit)

    def _load_page() -> list[dict]:
        phones = paginate(db.query(Phone).order_by(Phone.id.asc()), params)
        return [phone_to_dict(phone) for phone in phones]

    items = cache_backend.get(
        build_cache_key(LIST_CACHE_NAME, params.page, params.limit),
        _load_page,
        tags=[PHONES_CACHE_TAG],
    )
    is_admin = principal.is_admin()
    return [phone_with_links(item, request, is_admin=is_admin) for item in items]


@router.get("/phones/{phone_id}", name="api_detail_phone")
def get_phone(
    phone_id: int,
    request: Request,
    principal: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    phone = _get_phone_or_404(db, phone_id)
    return phone_with_links(phone_to_dict(phone), request, is_admin=principal.is_admin())


@router.post("/phones", name="api_create_phone", status_code=status.HTTP_201_CREATED)
def create_phone(
    payload: PhoneCreate,
    request: Request,
    principal: Customer = Depends(require_admin("create a phone")),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    phone = Phone(**payload.model_dump())
    db.add(phone)
    commit_or_rollback(db)
    db.refresh(phone)
    cache_backend.invalidate_tags([PHONES_CACHE_TAG])

    logger.info("phone created", extra={"entity": "phone", "entity_id": phone.id})
    return phone_with_links(phone_to_dict(phone), request, is_admin=True)


@router.put("/phones/{phone_id}", name="api_update_phone")
def update_phone(
    phone_id: int,
    payload: PhoneUpdate,
    request: Request,
    principal: Customer = Depends(require_admin("update a phone")),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    phone = _get_phone_or_404(db, phone_id)

    changes = merge_partial(phone, payload, nullable={"stock_quantity"})
    commit_or_rollback(db)
    db.refresh(phone)
    cache_backend.invalidate_tags([PHONES_CACHE_TAG])

    logger.info(
        "phone updated fields=%s",
        ",".join(sorted(changes)) or "-",
        extra={"entity": "phone", "entity_id": phone.id},
    )
    return phone_with_links(phone_to_dict(phone), request, is_admin=True)


@router.delete("/phones/{phone_id}", name="api_delete_phone", status_code=status.HTTP_204_NO_CONTENT)
def delete_phone(
    phone_id: int,
    principal: Customer = Depends(require_admin("delete a phone")),
    db: Session = Depends(get_db),
    cache_backend: TagAwareCache = Depends(get_cache),
):
    phone = _get_phone_or_404(db, phone_id)

    db.delete(phone)
    commit_or_rollback(db)
    cache_backend.invalidate_tags([PHONES_CACHE_TAG])

    logger.info("phone deleted", extra={"entity": "phone", "entity_id": phone_id})
    return None
