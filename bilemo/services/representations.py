"""Shaping of API payloads.

The ``*_to_dict`` functions produce the link-free representation that is safe
to cache; ``*_with_links`` decorate a copy of it for the viewer of the current
request (admin-only relations depend on the principal).
"""
from __future__ import annotations

import copy
from datetime import datetime
from typing import Any

from fastapi import Request

from bilemo.models.customer import Customer
from bilemo.models.phone import Phone
from bilemo.models.user import User

LINKS_KEY = "_links"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


def customer_to_dict(customer: Customer) -> dict[str, Any]:
    return {
        "id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "createdAt": _iso(customer.created_at),
        "users": [user_to_dict(user) for user in customer.users],
    }


def phone_to_dict(phone: Phone) -> dict[str, Any]:
    return {
        "id": phone.id,
        "model": phone.model,
        "manufacturer": phone.manufacturer,
        "processor": phone.processor,
        "ram": phone.ram,
        "storageCapacity": phone.storage_capacity,
        "cameraDetails": phone.camera_details,
        "batteryLife": phone.battery_life,
        "screenSize": phone.screen_size,
        "price": phone.price,
        "stockQuantity": phone.stock_quantity,
        "releaseDate": _iso(phone.release_date),
    }


def _href(request: Request, route_name: str, **params: Any) -> dict[str, str]:
    return {"href": str(request.app.url_path_for(route_name, **params))}


def user_with_links(data: dict[str, Any], request: Request) -> dict[str, Any]:
    result = copy.deepcopy(data)
    user_id = result["id"]
    result[LINKS_KEY] = {
        "self": _href(request, "api_get_users_by_customer", user_id=user_id),
        "list": _href(request, "api_get_users_list_by_customer"),
        "update": _href(request, "api_update_user", user_id=user_id),
        "create": _href(request, "api_create_user"),
        "delete": _href(request, "api_delete_user", user_id=user_id),
    }
    return result


def customer_with_links(data: dict[str, Any], request: Request, *, is_admin: bool) -> dict[str, Any]:
    result = copy.deepcopy(data)
    customer_id = result["id"]
    links = {
        "self": _href(request, "api_detail_customer", customer_id=customer_id),
        "list": _href(request, "api_list_customer"),
    }
    if is_admin:
        links["update"] = _href(request, "api_update_customer", customer_id=customer_id)
        links["delete"] = _href(request, "api_delete_customer", customer_id=customer_id)
    result["users"] = [user_with_links(user, request) for user in result.get("users", [])]
    result[LINKS_KEY] = links
    return result


def phone_with_links(data: dict[str, Any], request: Request, *, is_admin: bool) -> dict[str, Any]:
    result = copy.deepcopy(data)
    phone_id = result["id"]
    links = {"self": _href(request, "api_detail_phone", phone_id=phone_id)}
    if is_admin:
        links["update"] = _href(request, "api_update_phone", phone_id=phone_id)
        links["delete"] = _href(request, "api_delete_phone", phone_id=phone_id)
    result[LINKS_KEY] = links
    return result
