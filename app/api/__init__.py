"""Routers de la API."""
from fastapi import APIRouter, Depends

from app.api.endpoints import (
    activity_logs,
    auth,
    dashboard,
    registrations,
    reports,
    settings,
    sports,
    students,
    users,
)
from app.api.endpoints.auth import get_current_role, get_current_user
from app.core.roles import CoordinatorRole, Role
from app.models import User
from app.schemas.user import MeResponse

router = APIRouter()
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(students.router)
router.include_router(sports.router)
router.include_router(registrations.router)
router.include_router(settings.router)
router.include_router(dashboard.router)
router.include_router(reports.router)
router.include_router(activity_logs.router)


@router.get(
    "/me",
    response_model=MeResponse,
    tags=["api"],
    summary="Usuario actual (protegido)",
    responses={
        200: {"description": "Usuario obtenido correctamente"},
        401: {"description": "Token no enviado, inválido o expirado"},
    },
)
async def get_me(
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    """
    Devuelve el usuario actual a partir del JWT, con su rol y el año que coordina.
    **Requiere:** header `Authorization: Bearer <access_token>`.
    """
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        role=current_user.role,
        role_label=role.label,
        is_active=current_user.is_active,
        year=role.year if isinstance(role, CoordinatorRole) else None,
    )


@router.get(
    "/",
    tags=["api"],
    summary="Raíz de la API v1",
    response_description="Mensaje de bienvenida y enlace a la documentación",
)
async def api_root():
    """Información básica de la API y enlace a la documentación Swagger."""
    return {"message": "Sports Registration API v1", "docs": "/docs", "redoc": "/redoc"}
