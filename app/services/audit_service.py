"""Bitácora de actividad: registro de solo escritura de las acciones que modifican datos."""
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class AuditAction:
    """Acciones registradas en activity_logs."""
    STUDENTS_REGISTERED = "students_registered"
    REGISTRATION_STATUS_UPDATED = "registration_status_updated"
    REGISTRATION_DELETED = "registration_deleted"
    STUDENT_CREATED = "student_created"
    STUDENT_UPDATED = "student_updated"
    STUDENT_DELETED = "student_deleted"
    STUDENTS_IMPORTED = "students_imported"
    SPORT_CREATED = "sport_created"
    SPORT_UPDATED = "sport_updated"
    SPORT_DEACTIVATED = "sport_deactivated"
    SETTINGS_UPDATED = "settings_updated"
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_LOGIN = "user_login"


def record_activity(
    db: AsyncSession,
    actor_id: int | None,
    action: str,
    details: dict[str, Any] | None = None,
) -> ActivityLog:
    """Agrega la entrada a la transacción en curso; se confirma junto con el cambio que describe."""
    entry = ActivityLog(user_id=actor_id, action=action, details=details or {})
    db.add(entry)
    logger.info("Actividad '%s' del usuario %s: %s", action, actor_id, details or {})
    return entry
