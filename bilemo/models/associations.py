from sqlalchemy import Column, ForeignKey, Integer, Table

from bilemo.core.database import Base

user_customer = Table(
    "user_customer",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("customer_id", Integer, ForeignKey("customers.id", ondelete="CASCADE"), primary_key=True),
)
