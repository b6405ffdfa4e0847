"""Endpoints de configuración: cupos por categoría, auto-aprobación y registro abierto."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_role, get_current_user
from app.core.database import get_db
from app.core.roles import Role
from app.models import User
from app.schemas.settings import QuotaConfig, SystemSettings
from app.services import settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get(
    "/quota",
    response_model=QuotaConfig,
    summary="Cupos vigentes",
    description="Límites de inscripciones por estudiante y categoría (null = sin límite).",
)
async def get_quota_config(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await settings_service.get_quota_config(db)


@router.put(
    "/quota",
    response_model=QuotaConfig,
    summary="Actualizar cupos",
    responses={403: {"description": "Solo el administrador puede modificar la configuración"}},
)
async def update_quota_config(
    body: QuotaConfig,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    return await settings_service.set_quota_config(db, role, current_user.id, body)


@router.get("/system", response_model=SystemSettings, summary="Configuración del sistema")
async def get_system_settings(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await settings_service.get_system_settings(db)


@router.put("/system", response_model=SystemSettings, summary="Actualizar configuración del sistema")
async def update_system_settings(
    body: SystemSettings,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    return await settings_service.set_sign_up_enabled(db, role, current_user.id, body.sign_up_enabled)
