from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bilemo.core.database import Base
from bilemo.models.customer import ROLE_ADMIN, ROLE_CUSTOMER, Customer
from bilemo.models.user import User
from bilemo.services.memberships import detach_or_delete_user, link_user, unlink_user


def _session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _customer(email: str, roles=None) -> Customer:
    return Customer(name="Some Customer", email=email, password="hashed", roles=roles or [])


def test_roles_always_include_customer_role():
    assert _customer("a@bilemo.com").get_roles() == [ROLE_CUSTOMER]
    admin = _customer("b@bilemo.com", roles=[ROLE_ADMIN, ROLE_CUSTOMER])
    assert admin.get_roles() == [ROLE_ADMIN, ROLE_CUSTOMER]
    assert admin.is_admin()


def test_adding_user_to_customer_updates_both_sides():
    customer = _customer("a@bilemo.com")
    user = User(email="u@bilemo.com", first_name="Alice", last_name="Durand")

    customer.add_user(user)
    customer.add_user(user)

    assert customer.users == [user]
    assert user.customers == [customer]

    user.remove_customer(customer)

    assert customer.users == []
    assert not customer.has_user(user)


def test_link_and_unlink_report_whether_edge_changed():
    customer = _customer("a@bilemo.com")
    user = User(email="u@bilemo.com", first_name="Alice", last_name="Durand")

    assert link_user(customer, user) is True
    assert link_user(customer, user) is False
    assert unlink_user(customer, user) is True
    assert unlink_user(customer, user) is False


def test_detach_or_delete_user_deletes_exclusive_user():
    db = _session()
    customer = _customer("a@bilemo.com")
    user = User(email="u@bilemo.com", first_name="Alice", last_name="Durand")
    db.add_all([customer, user])
    link_user(customer, user)
    db.commit()

    assert detach_or_delete_user(db, customer, user) is True
    db.commit()

    assert db.query(User).count() == 0
    assert customer.users == []


def test_detach_or_delete_user_keeps_shared_user():
    db = _session()
    first = _customer("a@bilemo.com")
    second = _customer("b@bilemo.com")
    user = User(email="u@bilemo.com", first_name="Alice", last_name="Durand")
    db.add_all([first, second, user])
    link_user(first, user)
    link_user(second, user)
    db.commit()

    assert detach_or_delete_user(db, first, user) is False
    db.commit()

    stored = db.query(User).one()
    assert stored.customers == [second]
    assert first.users == []
