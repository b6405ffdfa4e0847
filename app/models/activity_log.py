"""Modelo ActivityLog (bitácora de acciones que modifican datos)."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Identity, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BigIntegerPK
from app.models.timestamps import utcnow

if TYPE_CHECKING:
    from app.models.user import User


class ActivityLog(Base):
    """Entrada de solo escritura: quién hizo qué, con detalles en JSON."""

    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(BigIntegerPK, Identity(always=True), primary_key=True)
    user_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=True, index=True
    )
    action: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    user: Mapped["User | None"] = relationship("User", back_populates="activity_logs")
