"""Dados de demonstração (catálogo, customers e usuários)."""
from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from bilemo.models.customer import ROLE_ADMIN, ROLE_CUSTOMER, Customer
from bilemo.models.phone import Phone
from bilemo.models.user import User
from bilemo.services.auth import hash_password
from bilemo.services.memberships import link_user

logger = logging.getLogger(__name__)

FIXTURE_ADMIN_EMAIL = "admin@bilemo.com"
FIXTURE_PASSWORD = "password"

USER_COUNT = 10
CUSTOMER_COUNT = 5
USERS_PER_CUSTOMER = 5
PHONE_COUNT = 10

_FIRST_NAMES = ["Camille", "Louis", "Manon", "Hugo", "Chloé", "Lucas", "Léa", "Jules", "Inès", "Arthur", "Emma", "Théo"]
_LAST_NAMES = ["Martin", "Bernard", "Dubois", "Thomas", "Robert", "Richard", "Petit", "Durand", "Leroy", "Moreau", "Simon", "Laurent"]
_COMPANY_SUFFIXES = ["SARL", "SAS", "Télécom", "Mobile", "Distribution"]
_MANUFACTURERS = ["Samsung", "Apple", "Huawei", "Xiaomi", "OnePlus"]
_PROCESSORS = ["Snapdragon 888", "A14 Bionic", "Kirin 9000", "Exynos 2100"]


@dataclass
class FixtureSummary:
    users: list[User] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)
    phones: list[Phone] = field(default_factory=list)
    admin: Customer | None = None


def _person(rng: random.Random, index: int) -> tuple[str, str, str]:
    first_name = rng.choice(_FIRST_NAMES)
    last_name = rng.choice(_LAST_NAMES)
    email = f"{first_name.lower()}.{last_name.lower()}{index}@bilemo-demo.fr"
    return first_name, last_name, email


def load_fixtures(db: Session, *, rng: random.Random | None = None) -> FixtureSummary:
    rng = rng or random.Random()
    summary = FixtureSummary()
    password_hash = hash_password(FIXTURE_PASSWORD)

    for index in range(USER_COUNT):
        first_name, last_name, email = _person(rng, index)
        user = User(email=email, first_name=first_name, last_name=last_name)
        db.add(user)
        summary.users.append(user)

    admin = Customer(
        email=FIXTURE_ADMIN_EMAIL,
        name="BileMo Admin",
        password=password_hash,
        roles=[ROLE_ADMIN],
    )
    db.add(admin)
    summary.admin = admin

    for index in range(CUSTOMER_COUNT):
        first_name, last_name, _ = _person(rng, index)
        customer = Customer(
            email=f"customer{index}@bilemo-demo.fr",
            name=f"{last_name} {rng.choice(_COMPANY_SUFFIXES)}",
            password=password_hash,
            roles=[ROLE_CUSTOMER],
        )
        db.add(customer)
        for user in rng.sample(summary.users, USERS_PER_CUSTOMER):
            link_user(customer, user)
        summary.customers.append(customer)

    for _ in range(PHONE_COUNT):
        phone = Phone(
            model="Model " + "".join(rng.choices(string.ascii_lowercase, k=4)),
            manufacturer=rng.choice(_MANUFACTURERS),
            processor=rng.choice(_PROCESSORS),
            ram=f"{rng.choice([4, 8, 16])} GB",
            storage_capacity=f"{rng.randint(0, 900)}GB",
            camera_details=f"{rng.randint(12, 108)}MP",
            battery_life=f"{rng.randint(10, 100)} heures",
            screen_size=f"{rng.uniform(5.0, 6.5):.2f} pouces",
            price=str(rng.randint(100, 1000)),
            stock_quantity=str(rng.randint(0, 100)),
        )
        db.add(phone)
        summary.phones.append(phone)

    db.commit()
    logger.info(
        "fixtures loaded users=%s customers=%s phones=%s",
        len(summary.users),
        len(summary.customers) + 1,
        len(summary.phones),
    )
    return summary
