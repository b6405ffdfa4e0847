"""Modelos SQLAlchemy (tablas de la base de datos)."""
from app.models.user import User
from app.models.student import Student
from app.models.sport import Sport, SportCategory, SPORT_CATEGORIES
from app.models.registration import Registration, RegistrationStatus, COUNTED_STATUSES
from app.models.setting import Setting, SettingKey
from app.models.activity_log import ActivityLog

__all__ = [
    "User",
    "Student",
    "Sport",
    "SportCategory",
    "SPORT_CATEGORIES",
    "Registration",
    "RegistrationStatus",
    "COUNTED_STATUSES",
    "Setting",
    "SettingKey",
    "ActivityLog",
]
