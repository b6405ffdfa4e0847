"""Evaluador de cupos: inscripciones vigentes por estudiante y categoría de deporte."""
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageFailureError
from app.models.registration import COUNTED_STATUSES, Registration
from app.models.sport import SPORT_CATEGORIES, Sport
from app.schemas.settings import QuotaConfig


@dataclass(frozen=True)
class QuotaStatus:
    student_id: int
    current_count: int
    limit: int | None
    exceeded: bool


def is_exceeded(current_count: int, limit: int | None) -> bool:
    """Con `limit` inscripciones ya no se admite otra; sin límite nunca se excede."""
    if limit is None:
        return False
    return current_count >= limit


async def evaluate(
    db: AsyncSession,
    student_ids: Iterable[int],
    category: str,
    config: QuotaConfig,
) -> dict[int, QuotaStatus]:
    """Cuenta en una sola consulta las inscripciones pendientes/aprobadas de cada estudiante
    en la categoría y las compara con el límite configurado."""
    ids = set(student_ids)
    if not ids:
        return {}
    limit = config.limit_for(category)

    q = (
        select(Registration.student_id, func.count(Registration.id).label("total"))
        .join(Sport, Sport.id == Registration.sport_id)
        .where(
            Registration.student_id.in_(ids),
            Registration.status.in_(COUNTED_STATUSES),
            Sport.category == category,
        )
        .group_by(Registration.student_id)
    )
    try:
        result = await db.execute(q)
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudieron contar las inscripciones") from exc
    counts = {row.student_id: row.total for row in result}

    return {
        student_id: QuotaStatus(
            student_id=student_id,
            current_count=counts.get(student_id, 0),
            limit=limit,
            exceeded=is_exceeded(counts.get(student_id, 0), limit),
        )
        for student_id in ids
    }


@dataclass
class CategoryUsage:
    current_count: int = 0
    sports: list[str] = field(default_factory=list)


async def registration_summary(
    db: AsyncSession,
    student_ids: Iterable[int],
) -> dict[int, dict[str, CategoryUsage]]:
    """Detalle por estudiante y categoría: cantidad y nombres de los deportes que cuentan para el cupo."""
    ids = set(student_ids)
    if not ids:
        return {}
    summary = {sid: {cat: CategoryUsage() for cat in SPORT_CATEGORIES} for sid in ids}

    q = (
        select(Registration.student_id, Sport.name, Sport.category)
        .join(Sport, Sport.id == Registration.sport_id)
        .where(
            Registration.student_id.in_(ids),
            Registration.status.in_(COUNTED_STATUSES),
        )
        .order_by(Sport.name)
    )
    try:
        result = await db.execute(q)
    except SQLAlchemyError as exc:
        raise StorageFailureError("No se pudieron leer las inscripciones") from exc

    for row in result:
        usage = summary[row.student_id].get(row.category)
        if usage is None:
            continue
        usage.current_count += 1
        usage.sports.append(row.name)
    return summary
