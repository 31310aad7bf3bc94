"""Customer <-> User edges.

Both sides of the many-to-many are kept in sync by the ORM relationship; the
helpers here are the only place application code creates or drops an edge.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from bilemo.models.customer import Customer
from bilemo.models.user import User

logger = logging.getLogger(__name__)


def link_user(customer: Customer, user: User) -> bool:
    if customer.has_user(user):
        return False
    customer.add_user(user)
    logger.info("user linked customer_id=%s user_id=%s", customer.id, user.id)
    return True


def unlink_user(customer: Customer, user: User) -> bool:
    if not customer.has_user(user):
        return False
    customer.remove_user(user)
    logger.info("user unlinked customer_id=%s user_id=%s", customer.id, user.id)
    return True


def detach_or_delete_user(db: Session, customer: Customer, user: User) -> bool:
    """Remove o usuário da carteira do customer.

    Se ele só pertence a este customer a linha é apagada; caso contrário só a
    aresta sai e os outros vínculos ficam intactos. Retorna True se apagou.
    """
    if len(user.customers) == 1 and customer.has_user(user):
        unlink_user(customer, user)
        db.delete(user)
        logger.info("user deleted user_id=%s", user.id)
        return True
    unlink_user(customer, user)
    return False
