from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from bilemo.core.database import Base
from bilemo.models.associations import user_customer

ROLE_CUSTOMER = "ROLE_CUSTOMER"
ROLE_ADMIN = "ROLE_ADMIN"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    """Conta consumidora da API; também é o principal autenticado."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    users = relationship(
        "User",
        secondary=user_customer,
        back_populates="customers",
        order_by="User.id",
    )

    def get_roles(self) -> list[str]:
        roles = list(self.roles or [])
        roles.append(ROLE_CUSTOMER)
        return list(dict.fromkeys(roles))

    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.get_roles()

    def has_user(self, user) -> bool:
        return user in self.users

    def add_user(self, user) -> "Customer":
        # back_populates espelha a aresta em user.customers
        if user not in self.users:
            self.users.append(user)
        return self

    def remove_user(self, user) -> "Customer":
        if user in self.users:
            self.users.remove(user)
        return self

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}')>"
