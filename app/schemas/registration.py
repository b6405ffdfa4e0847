"""Esquemas para inscripciones, resultado del flujo de inscripción y cupos."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class RegisterStudentsRequest(BaseModel):
    """Body para inscribir estudiantes en un deporte."""

    sport_id: int
    student_ids: list[int] = Field(description="Estudiantes seleccionados, en orden")
    override_quota: bool = Field(
        default=False,
        description="Confirmar la inscripción aunque algún estudiante haya alcanzado su cupo",
    )


class RegistrationFailure(BaseModel):
    student_id: int
    reason: str


class QuotaWarningItem(BaseModel):
    student_id: int
    current_count: int
    limit: int | None


class RegistrationResult(BaseModel):
    """Resultado de la inscripción.

    `quota_warning` no es un error: no se escribió nada y el cliente debe repetir
    la solicitud con override_quota=true para confirmar.
    """

    outcome: Literal["registered", "quota_warning"]
    sport_id: int
    registration_ids: list[int] = Field(default_factory=list)
    initial_status: str | None = None
    failures: list[RegistrationFailure] = Field(default_factory=list)
    quota_warnings: list[QuotaWarningItem] = Field(default_factory=list)


class StatusUpdateRequest(BaseModel):
    status: Literal["approved", "rejected"]


class RegistrationStudent(BaseModel):
    id: int
    name: str
    roll_number: str
    department: str
    year: str


class RegistrationSport(BaseModel):
    id: int
    name: str
    category: str
    venue: str | None = None
    event_date: datetime | None = None


class RegistrationItem(BaseModel):
    id: int
    status: str
    created_at: datetime
    student: RegistrationStudent
    sport: RegistrationSport


class RegistrationListResponse(BaseModel):
    total: int
    registrations: list[RegistrationItem]


class CategoryQuota(BaseModel):
    current_count: int
    limit: int | None
    exceeded: bool
    sports: list[str] = Field(default_factory=list)


class StudentQuotaSummary(BaseModel):
    """Inscripciones vigentes de un estudiante por categoría."""

    student_id: int
    name: str
    roll_number: str
    year: str
    game: CategoryQuota
    athletic: CategoryQuota


class QuotaSummaryResponse(BaseModel):
    students: list[StudentQuotaSummary]
