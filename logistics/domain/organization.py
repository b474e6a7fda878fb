"""SQLAlchemy ORM model for Organizations (the tenant root)."""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from logistics.db.base import Base
from logistics.domain.mixins import IdMixin, TimestampMixin


class Organization(Base, IdMixin, TimestampMixin):
    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # Deactivation is soft; rows are never deleted in normal operation
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
