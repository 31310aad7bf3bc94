from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from bilemo.core.database import Base
from bilemo.models.associations import user_customer


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(180), unique=True, index=True, nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)

    customers = relationship(
        "Customer",
        secondary=user_customer,
        back_populates="users",
        order_by="Customer.id",
    )

    def add_customer(self, customer) -> "User":
        if customer not in self.customers:
            self.customers.append(customer)
        return self

    def remove_customer(self, customer) -> "User":
        if customer in self.customers:
            self.customers.remove(customer)
        return self

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
