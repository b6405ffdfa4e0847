"""Consulta de la bitácora de actividad."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.endpoints.auth import get_current_role, get_current_user
from app.core.database import get_db
from app.core.roles import Role, is_admin
from app.models import ActivityLog, User
from app.schemas.activity_log import ActivityLogItem, ActivityLogListResponse

router = APIRouter(prefix="/activity-logs", tags=["activity-logs"])


@router.get(
    "",
    response_model=ActivityLogListResponse,
    summary="Listar actividad",
    description="El administrador ve toda la bitácora; los coordinadores solo sus propias acciones.",
)
async def list_activity_logs(
    action: str | None = Query(None, description="Filtrar por acción (p. ej. students_registered)"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    filtros = []
    if not is_admin(role):
        filtros.append(ActivityLog.user_id == current_user.id)
    if action:
        filtros.append(ActivityLog.action == action)

    total = (await db.execute(select(func.count(ActivityLog.id)).where(*filtros))).scalar_one()
    result = await db.execute(
        select(ActivityLog)
        .options(selectinload(ActivityLog.user))
        .where(*filtros)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return ActivityLogListResponse(
        total=total,
        activity_logs=[
            ActivityLogItem(
                id=log.id,
                user_id=log.user_id,
                user_name=log.user.full_name if log.user else None,
                action=log.action,
                details=log.details or {},
                created_at=log.created_at,
            )
            for log in result.scalars().all()
        ],
    )
