from bilemo.models.associations import user_customer
from bilemo.models.customer import Customer
from bilemo.models.phone import Phone
from bilemo.models.user import User
