"""Modelo Sport (evento deportivo: juego o atletismo)."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Identity, Integer, Text, func, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntegerPK
from app.models.timestamps import utcnow

if TYPE_CHECKING:
    from app.models.registration import Registration
    from app.models.user import User


class SportCategory:
    """Valores permitidos para la categoría del deporte (cupos por categoría)."""
    GAME = "game"
    ATHLETIC = "athletic"


SPORT_CATEGORIES = (SportCategory.GAME, SportCategory.ATHLETIC)


class Sport(Base):
    """Deporte creado por el administrador. Se desactiva en lugar de borrarse."""

    __tablename__ = "sports"

    id: Mapped[int] = mapped_column(BigIntegerPK, Identity(always=True), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    registration_deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    venue: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    created_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )

    creator: Mapped["User | None"] = relationship("User")
    registrations: Mapped[list["Registration"]] = relationship(
        "Registration", back_populates="sport", passive_deletes=True
    )
