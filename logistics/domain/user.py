"""SQLAlchemy ORM model for Users (members of one organization)."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from logistics.core.identity import Role
from logistics.db.base import Base
from logistics.domain.mixins import IdMixin, TenantMixin, TimestampMixin
from logistics.domain.organization import Organization


class User(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # "admin" | "user"
    role: Mapped[str] = mapped_column(String(20), default=Role.USER.value, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Only loaded on purpose, with joinedload, by the account lookups
    organization: Mapped[Organization] = relationship(lazy="raise", viewonly=True)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.email
