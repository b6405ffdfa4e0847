"""Configuración de cupos y del sistema guardada en la tabla settings.

Lectura libre para cualquier rol; escritura solo para el administrador.
Un límite ausente, nulo o 0 en la base se interpreta como "sin límite" (None).
"""
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ForbiddenError, StorageFailureError
from app.core.roles import Role, is_admin
from app.models.setting import Setting, SettingKey
from app.schemas.settings import QuotaConfig, SystemSettings
from app.services.audit_service import AuditAction, record_activity

logger = logging.getLogger(__name__)


def _limit_from_value(value: dict | None) -> int | None:
    """0, negativo, null o ausente ⇒ sin límite."""
    limit = (value or {}).get("limit")
    if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
        return None
    return limit


def _enabled_from_value(value: dict | None, default: bool) -> bool:
    if not value or "enabled" not in value:
        return default
    return bool(value["enabled"])


async def _load(db: AsyncSession, keys: list[str]) -> dict[str, dict]:
    try:
        result = await db.execute(select(Setting).where(Setting.key.in_(keys)))
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudo leer la configuración") from exc
    return {s.key: s.value for s in result.scalars().all()}


async def _upsert(db: AsyncSession, key: str, value: dict[str, Any], actor_id: int | None) -> None:
    result = await db.execute(select(Setting).where(Setting.key == key))
    setting = result.scalar_one_or_none()
    if setting is None:
        db.add(Setting(key=key, value=value, updated_by=actor_id))
    else:
        setting.value = value
        setting.updated_by = actor_id


async def get_quota_config(db: AsyncSession) -> QuotaConfig:
    """Cupos vigentes y bandera de auto-aprobación."""
    values = await _load(
        db,
        [
            SettingKey.MAX_GAME_REGISTRATIONS,
            SettingKey.MAX_ATHLETIC_REGISTRATIONS,
            SettingKey.AUTO_APPROVE_REGISTRATIONS,
        ],
    )
    return QuotaConfig(
        max_game_registrations=_limit_from_value(values.get(SettingKey.MAX_GAME_REGISTRATIONS)),
        max_athletic_registrations=_limit_from_value(values.get(SettingKey.MAX_ATHLETIC_REGISTRATIONS)),
        auto_approve=_enabled_from_value(values.get(SettingKey.AUTO_APPROVE_REGISTRATIONS), False),
    )


async def set_quota_config(
    db: AsyncSession,
    role: Role,
    actor_id: int | None,
    config: QuotaConfig,
) -> QuotaConfig:
    """Guarda los cupos y la auto-aprobación. Solo administrador."""
    if not is_admin(role):
        logger.warning("Usuario %s intentó modificar los cupos sin ser administrador", actor_id)
        raise ForbiddenError("Solo el administrador puede modificar la configuración")

    try:
        await _upsert(db, SettingKey.MAX_GAME_REGISTRATIONS, {"limit": config.max_game_registrations}, actor_id)
        await _upsert(
            db, SettingKey.MAX_ATHLETIC_REGISTRATIONS, {"limit": config.max_athletic_registrations}, actor_id
        )
        await _upsert(db, SettingKey.AUTO_APPROVE_REGISTRATIONS, {"enabled": config.auto_approve}, actor_id)
        record_activity(db, actor_id, AuditAction.SETTINGS_UPDATED, config.model_dump())
        await db.flush()
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudo guardar la configuración") from exc
    return config


async def get_system_settings(db: AsyncSession) -> SystemSettings:
    values = await _load(db, [SettingKey.SIGN_UP_ENABLED])
    return SystemSettings(
        sign_up_enabled=_enabled_from_value(values.get(SettingKey.SIGN_UP_ENABLED), True),
    )


async def set_sign_up_enabled(
    db: AsyncSession,
    role: Role,
    actor_id: int | None,
    enabled: bool,
) -> SystemSettings:
    """Abre o cierra el registro de nuevos coordinadores. Solo administrador."""
    if not is_admin(role):
        raise ForbiddenError("Solo el administrador puede modificar la configuración")
    try:
        await _upsert(db, SettingKey.SIGN_UP_ENABLED, {"enabled": enabled}, actor_id)
        record_activity(db, actor_id, AuditAction.SETTINGS_UPDATED, {"sign_up_enabled": enabled})
        await db.flush()
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudo guardar la configuración") from exc
    return SystemSettings(sign_up_enabled=enabled)


async def ensure_default_settings(db: AsyncSession) -> None:
    """Inserta las claves que falten con los valores por defecto de la configuración."""
    defaults = {
        SettingKey.MAX_GAME_REGISTRATIONS: {"limit": settings.default_max_game_registrations},
        SettingKey.MAX_ATHLETIC_REGISTRATIONS: {"limit": settings.default_max_athletic_registrations},
        SettingKey.AUTO_APPROVE_REGISTRATIONS: {"enabled": settings.default_auto_approve},
        SettingKey.SIGN_UP_ENABLED: {"enabled": settings.default_sign_up_enabled},
    }
    existentes = await _load(db, list(defaults))
    for key, value in defaults.items():
        if key not in existentes:
            db.add(Setting(key=key, value=value))
            logger.info("Configuración '%s' inicializada con %s", key, value)
