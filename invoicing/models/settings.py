"""
Application Settings Model - Key/value configuration rows
"""
from sqlalchemy import Column, String, Boolean, JSON

from invoicing.core import Base
from .base import UUIDMixin, TimestampMixin


class AppSetting(Base, UUIDMixin, TimestampMixin):
    """Studio-wide setting (general_settings, invoice_settings, ...)"""
    __tablename__ = "app_settings"

    key = Column(String(100), nullable=False, index=True)
    value = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, default=True, nullable=False)
