"""
Member Model (read-only view used for invoice customer details)
"""
from sqlalchemy import Column, String

from invoicing.core import Base
from .base import UUIDMixin, TimestampMixin


class Member(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "members"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(200))
