"""SQLAlchemy ORM model for Carriers."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from logistics.db.base import Base
from logistics.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class Carrier(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "carriers"
    __table_args__ = (UniqueConstraint("id", "organization_id", name="uq_carriers_id_org"),)

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    mc_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    dot_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    insurance_provider: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    insurance_policy_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    insurance_expiry: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
