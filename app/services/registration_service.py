"""Flujo de inscripción de estudiantes en deportes.

Orden de validaciones: selección vacía, alcance del rol, duplicados, cupos
(con confirmación en dos pasos) y finalmente la inserción en lote.

El control de cupos es una lectura previa a la escritura: dos coordinadores
inscribiendo al mismo estudiante en deportes distintos de la misma categoría
a la vez pueden superar el límite en uno. Los duplicados, en cambio, siempre
los rechaza la restricción única (student_id, sport_id).
"""
import logging
from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import (
    DuplicateRegistrationError,
    EmptySelectionError,
    ForbiddenError,
    InvalidStatusTransitionError,
    RegistrationNotFoundError,
    ScopeViolationError,
    SportNotFoundError,
    StorageFailureError,
    StudentNotFoundError,
)
from app.core.roles import Role, is_admin
from app.models.registration import Registration, RegistrationStatus
from app.models.sport import Sport
from app.models.student import Student
from app.schemas.registration import (
    QuotaWarningItem,
    RegistrationFailure,
    RegistrationResult,
)
from app.schemas.settings import QuotaConfig
from app.services import quota_service, scope_service
from app.services.audit_service import AuditAction, record_activity

logger = logging.getLogger(__name__)

FAILURE_DUPLICATE = "duplicate_registration"


async def _existing_student_ids(db: AsyncSession, sport_id: int, student_ids: Sequence[int]) -> set[int]:
    result = await db.execute(
        select(Registration.student_id).where(
            Registration.sport_id == sport_id,
            Registration.student_id.in_(student_ids),
        )
    )
    return set(result.scalars().all())


async def register_students(
    db: AsyncSession,
    role: Role,
    actor_id: int | None,
    student_ids: Sequence[int],
    sport_id: int,
    override_quota: bool,
    config: QuotaConfig,
) -> RegistrationResult:
    """Inscribe a los estudiantes en el deporte.

    Devuelve `quota_warning` (sin escribir nada) si algún estudiante alcanzó su cupo
    y no se confirmó con `override_quota`. Las inscripciones se insertan todas o ninguna.
    """
    # ── 1. Selección ───────────────────────────────────────────────
    ids = list(dict.fromkeys(student_ids))
    if not ids:
        raise EmptySelectionError("Debe seleccionar al menos un estudiante")

    try:
        sport = await db.get(Sport, sport_id)
        result = await db.execute(select(Student).where(Student.id.in_(ids)))
        students = {s.id: s for s in result.scalars().all()}
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudieron leer los datos de la inscripción") from exc

    if sport is None or not sport.is_active:
        raise SportNotFoundError(f"No se encontró un deporte activo con ID {sport_id}")
    faltantes = [sid for sid in ids if sid not in students]
    if faltantes:
        raise StudentNotFoundError("Estudiantes no existentes", student_ids=faltantes)

    # ── 2. Alcance del rol (rechaza toda la solicitud) ─────────────
    try:
        scope_service.ensure_can_register(role, [students[sid] for sid in ids])
    except ScopeViolationError:
        logger.warning("Inscripción rechazada por alcance: usuario %s, deporte %s", actor_id, sport_id)
        raise

    # ── 3. Duplicados ──────────────────────────────────────────────
    try:
        ya_inscritos = await _existing_student_ids(db, sport_id, ids)
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudieron leer las inscripciones existentes") from exc
    failures = [
        RegistrationFailure(student_id=sid, reason=FAILURE_DUPLICATE) for sid in ids if sid in ya_inscritos
    ]
    candidatos = [sid for sid in ids if sid not in ya_inscritos]
    if not candidatos:
        raise DuplicateRegistrationError(
            f"Los estudiantes ya están inscritos en {sport.name}", student_ids=sorted(ya_inscritos)
        )

    # ── 4. Cupos por categoría ─────────────────────────────────────
    cupos = await quota_service.evaluate(db, candidatos, sport.category, config)
    excedidos = [cupos[sid] for sid in candidatos if cupos[sid].exceeded]
    if excedidos and not override_quota:
        logger.info(
            "Inscripción en %s requiere confirmación: %d estudiante(s) alcanzaron el cupo",
            sport.name, len(excedidos),
        )
        return RegistrationResult(
            outcome="quota_warning",
            sport_id=sport.id,
            failures=failures,
            quota_warnings=[
                QuotaWarningItem(student_id=q.student_id, current_count=q.current_count, limit=q.limit)
                for q in excedidos
            ],
        )

    # ── 5-6. Estado inicial e inserción en lote ────────────────────
    initial_status = RegistrationStatus.APPROVED if config.auto_approve else RegistrationStatus.PENDING
    registrations = [
        Registration(student_id=sid, sport_id=sport.id, registered_by=actor_id, status=initial_status)
        for sid in candidatos
    ]
    db.add_all(registrations)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Inscripción concurrente duplicada en el deporte %s", sport_id)
        raise DuplicateRegistrationError(
            "Otro usuario inscribió a uno o más de estos estudiantes en el mismo deporte",
            student_ids=candidatos,
        ) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageFailureError("No se pudieron guardar las inscripciones") from exc

    # ── 7. Bitácora ────────────────────────────────────────────────
    record_activity(
        db,
        actor_id,
        AuditAction.STUDENTS_REGISTERED,
        {
            "sport_id": sport.id,
            "sport_name": sport.name,
            "student_count": len(candidatos),
            "students": candidatos,
            "quota_overridden": bool(excedidos),
        },
    )
    logger.info(
        "%d estudiante(s) inscritos en %s con estado %s",
        len(registrations), sport.name, initial_status,
    )
    return RegistrationResult(
        outcome="registered",
        sport_id=sport.id,
        registration_ids=[r.id for r in registrations],
        initial_status=initial_status,
        failures=failures,
    )


async def _get_registration(db: AsyncSession, registration_id: int) -> Registration:
    result = await db.execute(
        select(Registration)
        .options(selectinload(Registration.student), selectinload(Registration.sport))
        .where(Registration.id == registration_id)
    )
    registration = result.scalar_one_or_none()
    if registration is None:
        raise RegistrationNotFoundError(f"No se encontró la inscripción con ID {registration_id}")
    return registration


async def update_registration_status(
    db: AsyncSession,
    role: Role,
    actor_id: int | None,
    registration_id: int,
    new_status: str,
) -> Registration:
    """Aprueba o rechaza una inscripción pendiente. Solo administrador.

    approved y rejected son estados finales.
    """
    if not is_admin(role):
        raise ForbiddenError("Solo el administrador puede aprobar o rechazar inscripciones")
    if new_status not in (RegistrationStatus.APPROVED, RegistrationStatus.REJECTED):
        raise InvalidStatusTransitionError(f"Estado destino no válido: {new_status}")

    registration = await _get_registration(db, registration_id)
    if registration.status != RegistrationStatus.PENDING:
        raise InvalidStatusTransitionError(
            f"La inscripción ya está en estado '{registration.status}' y no puede cambiar"
        )
    registration.status = new_status
    record_activity(
        db,
        actor_id,
        AuditAction.REGISTRATION_STATUS_UPDATED,
        {"registration_id": registration.id, "new_status": new_status},
    )
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudo actualizar la inscripción") from exc
    return registration


async def delete_registration(
    db: AsyncSession,
    role: Role,
    actor_id: int | None,
    registration_id: int,
) -> None:
    """Elimina la inscripción (deja de contar para el cupo). Admin o coordinador del año del estudiante."""
    registration = await _get_registration(db, registration_id)
    scope_service.ensure_can_view(role, registration.student)

    details = {
        "registration_id": registration.id,
        "student_id": registration.student_id,
        "student_name": registration.student.name,
        "sport_id": registration.sport_id,
        "sport_name": registration.sport.name,
    }
    await db.delete(registration)
    record_activity(db, actor_id, AuditAction.REGISTRATION_DELETED, details)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudo eliminar la inscripción") from exc


async def list_registrations(
    db: AsyncSession,
    role: Role,
    status: str | None = None,
    category: str | None = None,
    sport_id: int | None = None,
    search: str | None = None,
    year: str | None = None,
) -> list[Registration]:
    """Inscripciones visibles para el rol, más recientes primero."""
    q = (
        select(Registration)
        .join(Student, Student.id == Registration.student_id)
        .join(Sport, Sport.id == Registration.sport_id)
        .options(selectinload(Registration.student), selectinload(Registration.sport))
        .where(scope_service.student_scope_clause(role))
        .order_by(Registration.created_at.desc(), Registration.id.desc())
    )
    if status:
        q = q.where(Registration.status == status)
    if category:
        q = q.where(Sport.category == category)
    if sport_id is not None:
        q = q.where(Registration.sport_id == sport_id)
    if year:
        q = q.where(Student.year == year)
    if search:
        patron = f"%{search.lower()}%"
        q = q.where(
            or_(
                func.lower(Student.name).like(patron),
                func.lower(Student.roll_number).like(patron),
                func.lower(Sport.name).like(patron),
            )
        )
    try:
        result = await db.execute(q)
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudieron leer las inscripciones") from exc
    return list(result.scalars().unique().all())
