"""Estadísticas del panel principal, calculadas sobre los estudiantes visibles para el rol."""
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_role, get_current_user
from app.core.database import get_db
from app.core.roles import Role, is_admin
from app.models import ActivityLog, Registration, RegistrationStatus, Sport, Student, User
from app.models.timestamps import utcnow
from app.schemas.dashboard import DashboardStats
from app.services import scope_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

DIAS_ACTIVIDAD_RECIENTE = 7


@router.get("/stats", response_model=DashboardStats, summary="Estadísticas del panel")
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    alcance = scope_service.student_scope_clause(role)

    total_students = (
        await db.execute(select(func.count(Student.id)).where(alcance))
    ).scalar_one()
    total_sports = (
        await db.execute(select(func.count(Sport.id)).where(Sport.is_active.is_(True)))
    ).scalar_one()

    por_estado = await db.execute(
        select(Registration.status, func.count(Registration.id))
        .join(Student, Student.id == Registration.student_id)
        .where(alcance)
        .group_by(Registration.status)
    )
    conteo = {estado: total for estado, total in por_estado.all()}

    desde = utcnow() - timedelta(days=DIAS_ACTIVIDAD_RECIENTE)
    q_actividad = select(func.count(ActivityLog.id)).where(ActivityLog.created_at >= desde)
    if not is_admin(role):
        q_actividad = q_actividad.where(ActivityLog.user_id == current_user.id)
    recent_activity = (await db.execute(q_actividad)).scalar_one()

    return DashboardStats(
        total_students=total_students,
        total_sports=total_sports,
        total_registrations=sum(conteo.values()),
        pending_registrations=conteo.get(RegistrationStatus.PENDING, 0),
        approved_registrations=conteo.get(RegistrationStatus.APPROVED, 0),
        rejected_registrations=conteo.get(RegistrationStatus.REJECTED, 0),
        recent_activity=recent_activity,
    )
