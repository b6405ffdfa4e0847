"""Descarga de reportes de inscripciones en PDF o CSV."""
from io import BytesIO
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_role, get_current_user
from app.core.database import get_db
from app.core.exceptions import ScopeViolationError
from app.core.roles import YEAR_LABELS, CoordinatorRole, Role
from app.models import Sport, User
from app.services import registration_service, report_service

router = APIRouter(prefix="/reports", tags=["reports"])

_MEDIA_TYPES = {"pdf": "application/pdf", "csv": "text/csv"}


@router.get(
    "/registrations",
    summary="Reporte de inscripciones",
    description=(
        "PDF o CSV con las inscripciones visibles para el rol. El administrador puede filtrar "
        "por año y por deporte; un coordinador solo obtiene las de su año."
    ),
    responses={
        200: {
            "content": {"application/pdf": {}, "text/csv": {}},
            "description": "Archivo generado",
        },
        403: {"description": "El año solicitado no corresponde al coordinador"},
        404: {"description": "Deporte no encontrado"},
    },
)
async def registrations_report(
    format: Literal["pdf", "csv"] = Query("pdf", description="pdf o csv"),
    year: str | None = Query(None, description="first, second, third o fourth"),
    sport_id: int | None = Query(None),
    status_filter: str | None = Query(None, alias="status", description="pending, approved o rejected"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    if isinstance(role, CoordinatorRole):
        if year and year != role.year:
            raise ScopeViolationError("Solo puede generar reportes del año que coordina")
        year = role.year

    titulo = "Sports Registrations"
    partes = []
    if year:
        partes.append(YEAR_LABELS.get(year, year))
    sport = None
    if sport_id is not None:
        sport = await db.get(Sport, sport_id)
        if not sport:
            raise HTTPException(status_code=404, detail="Deporte no encontrado")
        partes.append(sport.name)
    if status_filter:
        partes.append(status_filter.capitalize())
    subtitulo = " / ".join(partes) if partes else "All years, all sports"

    registrations = await registration_service.list_registrations(
        db, role, status=status_filter, sport_id=sport_id, year=year
    )

    if format == "csv":
        contenido = report_service.generate_registrations_csv(registrations)
    else:
        contenido = report_service.generate_registrations_pdf(
            registrations,
            titulo=titulo,
            subtitulo=subtitulo,
            usuario_nombre=current_user.full_name,
            group_by_sport=sport is None,
        )

    nombre = "registrations"
    if year:
        nombre += f"_{year}_year"
    if sport is not None:
        nombre += f"_{sport.name.lower().replace(' ', '_')}"
    filename = f"{nombre}.{format}"
    return StreamingResponse(
        BytesIO(contenido),
        media_type=_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
