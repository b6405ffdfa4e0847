"""Modelo Student."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Identity, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntegerPK
from app.models.timestamps import utcnow

if TYPE_CHECKING:
    from app.models.registration import Registration


class Student(Base):
    """Estudiante identificado por número de matrícula; el año no cambia tras crearse."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(BigIntegerPK, Identity(always=True), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    roll_number: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    department: Mapped[str] = mapped_column(Text, nullable=False)
    year: Mapped[str] = mapped_column(Text, nullable=False, index=True)  # first, second, third, fourth
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
        server_default=func.now(),
    )

    registrations: Mapped[list["Registration"]] = relationship(
        "Registration", back_populates="student", passive_deletes=True
    )
