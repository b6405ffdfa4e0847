"""Modelo User (perfil de administradores y coordinadores)."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Identity, Text, func, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntegerPK
from app.core.roles import Role, parse_role
from app.models.timestamps import utcnow

if TYPE_CHECKING:
    from app.models.activity_log import ActivityLog


class User(Base):
    """Usuario del sistema. `role` guarda el nombre del rol (admin, second_year_coordinator, ...)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntegerPK, Identity(always=True), primary_key=True)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )

    activity_logs: Mapped[list["ActivityLog"]] = relationship(
        "ActivityLog", back_populates="user"
    )

    @property
    def role_value(self) -> Role:
        """Rol tipado (AdminRole o CoordinatorRole)."""
        return parse_role(self.role)
