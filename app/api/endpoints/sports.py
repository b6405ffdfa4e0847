"""Endpoints de deportes: listado para todos los roles, alta/edición/desactivación solo admin."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_role, require_admin
from app.core.database import get_db
from app.core.roles import Role, is_admin
from app.models import Sport, User
from app.schemas.sport import SportCreate, SportItem, SportListResponse, SportUpdate, deadline_valido
from app.services.audit_service import AuditAction, record_activity

router = APIRouter(prefix="/sports", tags=["sports"])

_CAMPOS_OBLIGATORIOS = ("name", "category", "is_active")


def _to_item(s: Sport) -> SportItem:
    return SportItem(
        id=s.id,
        name=s.name,
        category=s.category,
        description=s.description,
        max_participants=s.max_participants,
        registration_deadline=s.registration_deadline,
        event_date=s.event_date,
        venue=s.venue,
        is_active=s.is_active,
    )


async def _get_sport_or_404(db: AsyncSession, sport_id: int) -> Sport:
    sport = await db.get(Sport, sport_id)
    if not sport:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deporte no encontrado")
    return sport


@router.get(
    "",
    response_model=SportListResponse,
    summary="Listar deportes",
    description=(
        "Devuelve los deportes activos ordenados por nombre. "
        "El administrador puede incluir los desactivados con include_inactive=true."
    ),
)
async def list_sports(
    category: str | None = Query(None, description="game o athletic"),
    include_inactive: bool = Query(False, description="Solo admin: incluir deportes desactivados"),
    db: AsyncSession = Depends(get_db),
    role: Role = Depends(get_current_role),
):
    q = select(Sport).order_by(Sport.name)
    if not (include_inactive and is_admin(role)):
        q = q.where(Sport.is_active.is_(True))
    if category:
        q = q.where(Sport.category == category)
    result = await db.execute(q)
    return SportListResponse(sports=[_to_item(s) for s in result.scalars().all()])


@router.get("/{sport_id}", response_model=SportItem, summary="Detalle de deporte")
async def get_sport(
    sport_id: int,
    db: AsyncSession = Depends(get_db),
    role: Role = Depends(get_current_role),
):
    sport = await _get_sport_or_404(db, sport_id)
    if not sport.is_active and not is_admin(role):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deporte no encontrado")
    return _to_item(sport)


@router.post(
    "",
    response_model=SportItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear deporte",
)
async def create_sport(
    body: SportCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    sport = Sport(**body.model_dump(), created_by=admin.id)
    db.add(sport)
    await db.flush()
    record_activity(
        db, admin.id, AuditAction.SPORT_CREATED,
        {"sport_id": sport.id, "sport_name": sport.name, "category": sport.category},
    )
    return _to_item(sport)


@router.patch(
    "/{sport_id}",
    response_model=SportItem,
    summary="Actualizar deporte",
    description="Solo se modifican los campos enviados. La fecha límite debe quedar antes del evento.",
)
async def update_sport(
    sport_id: int,
    body: SportUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    sport = await _get_sport_or_404(db, sport_id)
    # null explícito limpia los campos opcionales
    cambios = body.model_dump(exclude_unset=True)

    nulos = sorted(c for c in _CAMPOS_OBLIGATORIOS if c in cambios and cambios[c] is None)
    if nulos:
        raise HTTPException(status_code=422, detail=f"Campos que no admiten null: {', '.join(nulos)}")

    deadline = cambios.get("registration_deadline", sport.registration_deadline)
    event_date = cambios.get("event_date", sport.event_date)
    if not deadline_valido(deadline, event_date):
        raise HTTPException(
            status_code=422,
            detail="registration_deadline debe ser anterior a event_date",
        )

    for campo, valor in cambios.items():
        setattr(sport, campo, valor)
    await db.flush()
    record_activity(
        db, admin.id, AuditAction.SPORT_UPDATED,
        {"sport_id": sport.id, **body.model_dump(mode="json", exclude_unset=True)},
    )
    return _to_item(sport)


@router.delete(
    "/{sport_id}",
    response_model=SportItem,
    summary="Desactivar deporte",
    description=(
        "Los deportes no se eliminan: quedan inactivos, dejan de aceptar inscripciones "
        "y sus inscripciones existentes se conservan."
    ),
)
async def deactivate_sport(
    sport_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    sport = await _get_sport_or_404(db, sport_id)
    sport.is_active = False
    await db.flush()
    record_activity(
        db, admin.id, AuditAction.SPORT_DEACTIVATED, {"sport_id": sport.id, "sport_name": sport.name}
    )
    return _to_item(sport)
