"""Modelo Setting (configuración clave/valor editable por el administrador)."""
from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Identity, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BigIntegerPK
from app.models.timestamps import utcnow


class SettingKey:
    """Claves conocidas de la tabla settings."""
    MAX_GAME_REGISTRATIONS = "max_game_registrations"
    MAX_ATHLETIC_REGISTRATIONS = "max_athletic_registrations"
    AUTO_APPROVE_REGISTRATIONS = "auto_approve_registrations"
    SIGN_UP_ENABLED = "sign_up_enabled"


class Setting(Base):
    """Valor JSON por clave, ej. max_game_registrations -> {"limit": 2}."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(BigIntegerPK, Identity(always=True), primary_key=True)
    key: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    value: Mapped[dict] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    updated_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )
