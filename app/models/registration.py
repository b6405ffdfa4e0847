"""Modelo Registration (estudiante inscrito en un deporte)."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, Identity, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntegerPK
from app.models.timestamps import utcnow

if TYPE_CHECKING:
    from app.models.sport import Sport
    from app.models.student import Student
    from app.models.user import User


class RegistrationStatus:
    """Valores permitidos para el estado de la inscripción."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Estados que cuentan para el cupo por categoría
COUNTED_STATUSES = (RegistrationStatus.PENDING, RegistrationStatus.APPROVED)


class Registration(Base):
    """Inscripción: como máximo una por par (estudiante, deporte)."""

    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("student_id", "sport_id", name="uq_registrations_student_sport"),
    )

    id: Mapped[int] = mapped_column(BigIntegerPK, Identity(always=True), primary_key=True)
    student_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sport_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("sports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    registered_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        Text, nullable=False, default=RegistrationStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )

    student: Mapped["Student"] = relationship("Student", back_populates="registrations")
    sport: Mapped["Sport"] = relationship("Sport", back_populates="registrations")
    registrar: Mapped["User | None"] = relationship("User")
