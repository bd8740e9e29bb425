from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DateTime, func

from .authz import Base


class CompanySettings(Base):
    __tablename__ = 'company_settings'
    SINGLETON_ID = 1
    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    company_name: Mapped[str] = mapped_column(String(128), nullable=False, default='My E-Commerce Store')
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default='USD')
    low_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
