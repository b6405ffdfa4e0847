"""Endpoints de inscripciones: inscribir, listar, ver cupos, aprobar/rechazar y eliminar."""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_role, get_current_user
from app.core.database import get_db
from app.core.roles import Role
from app.models import Registration, SportCategory, Student, User
from app.schemas.registration import (
    CategoryQuota,
    QuotaSummaryResponse,
    RegisterStudentsRequest,
    RegistrationItem,
    RegistrationListResponse,
    RegistrationResult,
    RegistrationSport,
    RegistrationStudent,
    StatusUpdateRequest,
    StudentQuotaSummary,
)
from app.services import quota_service, registration_service, scope_service, settings_service

router = APIRouter(prefix="/registrations", tags=["registrations"])


def _to_item(r: Registration) -> RegistrationItem:
    return RegistrationItem(
        id=r.id,
        status=r.status,
        created_at=r.created_at,
        student=RegistrationStudent(
            id=r.student.id,
            name=r.student.name,
            roll_number=r.student.roll_number,
            department=r.student.department,
            year=r.student.year,
        ),
        sport=RegistrationSport(
            id=r.sport.id,
            name=r.sport.name,
            category=r.sport.category,
            venue=r.sport.venue,
            event_date=r.sport.event_date,
        ),
    )


@router.post(
    "",
    response_model=RegistrationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Inscribir estudiantes en un deporte",
    responses={
        200: {"description": "Algún estudiante alcanzó su cupo; repetir con override_quota=true"},
        201: {"description": "Inscripciones creadas"},
        403: {"description": "Estudiantes fuera del año del coordinador, o usuario administrador"},
        409: {"description": "Los estudiantes ya están inscritos en el deporte"},
        422: {"description": "No se seleccionó ningún estudiante"},
    },
)
async def register_students(
    body: RegisterStudentsRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    """
    Inscribe a los estudiantes seleccionados. Si alguno ya tiene el máximo de inscripciones
    en la categoría del deporte, responde **200** con `outcome=quota_warning` sin guardar nada;
    el cliente confirma reenviando la misma solicitud con `override_quota=true`.
    """
    config = await settings_service.get_quota_config(db)
    result = await registration_service.register_students(
        db,
        role,
        current_user.id,
        body.student_ids,
        body.sport_id,
        body.override_quota,
        config,
    )
    if result.outcome == "quota_warning":
        response.status_code = status.HTTP_200_OK
    return result


@router.get(
    "",
    response_model=RegistrationListResponse,
    summary="Listar inscripciones",
    description="Admin ve todas; un coordinador solo las de estudiantes de su año.",
)
async def list_registrations(
    status_filter: str | None = Query(None, alias="status", description="pending, approved o rejected"),
    category: str | None = Query(None, description="game o athletic"),
    sport_id: int | None = Query(None),
    search: str | None = Query(None, description="Estudiante, matrícula o deporte"),
    year: str | None = Query(None, description="first, second, third o fourth"),
    db: AsyncSession = Depends(get_db),
    role: Role = Depends(get_current_role),
):
    registrations = await registration_service.list_registrations(
        db, role, status=status_filter, category=category, sport_id=sport_id, search=search, year=year,
    )
    return RegistrationListResponse(
        total=len(registrations),
        registrations=[_to_item(r) for r in registrations],
    )


@router.get(
    "/quota",
    response_model=QuotaSummaryResponse,
    summary="Cupos por estudiante",
    description=(
        "Para cada estudiante visible: inscripciones vigentes (pendientes o aprobadas) "
        "por categoría frente al límite configurado."
    ),
)
async def quota_summary(
    year: str | None = Query(None, description="first, second, third o fourth"),
    db: AsyncSession = Depends(get_db),
    role: Role = Depends(get_current_role),
):
    q = select(Student).where(scope_service.student_scope_clause(role)).order_by(Student.name)
    if year:
        q = q.where(Student.year == year)
    result = await db.execute(q)
    students = result.scalars().all()

    config = await settings_service.get_quota_config(db)
    summary = await quota_service.registration_summary(db, [s.id for s in students])

    def _category(student_id: int, category: str) -> CategoryQuota:
        usage = summary[student_id][category]
        limit = config.limit_for(category)
        return CategoryQuota(
            current_count=usage.current_count,
            limit=limit,
            exceeded=quota_service.is_exceeded(usage.current_count, limit),
            sports=usage.sports,
        )

    return QuotaSummaryResponse(
        students=[
            StudentQuotaSummary(
                student_id=s.id,
                name=s.name,
                roll_number=s.roll_number,
                year=s.year,
                game=_category(s.id, SportCategory.GAME),
                athletic=_category(s.id, SportCategory.ATHLETIC),
            )
            for s in students
        ]
    )


@router.patch(
    "/{registration_id}/status",
    response_model=RegistrationItem,
    summary="Aprobar o rechazar inscripción",
    description="Solo administrador. Únicamente las inscripciones pendientes cambian de estado.",
)
async def update_registration_status(
    registration_id: int,
    body: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    registration = await registration_service.update_registration_status(
        db, role, current_user.id, registration_id, body.status
    )
    return _to_item(registration)


@router.delete(
    "/{registration_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar inscripción",
)
async def delete_registration(
    registration_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
):
    await registration_service.delete_registration(db, role, current_user.id, registration_id)
