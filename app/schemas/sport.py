"""Esquemas para deportes."""
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, model_validator

SportCategoryLiteral = Literal["game", "athletic"]


def as_utc(valor: datetime | None) -> datetime | None:
    """Fechas sin zona horaria se interpretan como UTC para poder compararlas."""
    if valor is None or valor.tzinfo is not None:
        return valor
    return valor.replace(tzinfo=timezone.utc)


def deadline_valido(deadline: datetime | None, event_date: datetime | None) -> bool:
    if not deadline or not event_date:
        return True
    return as_utc(deadline) < as_utc(event_date)


class _FechasSport(BaseModel):
    @model_validator(mode="after")
    def deadline_antes_del_evento(self):
        if not deadline_valido(self.registration_deadline, self.event_date):
            raise ValueError("registration_deadline debe ser anterior a event_date")
        return self


class SportCreate(_FechasSport):
    """Body para crear un deporte."""

    name: str = Field(min_length=1)
    category: SportCategoryLiteral = Field(description="game o athletic")
    description: str | None = None
    max_participants: int | None = Field(default=None, gt=0)
    registration_deadline: datetime | None = None
    event_date: datetime | None = None
    venue: str | None = None


class SportUpdate(_FechasSport):
    """Body para editar un deporte; solo se modifican los campos enviados."""

    name: str | None = Field(default=None, min_length=1)
    category: SportCategoryLiteral | None = None
    description: str | None = None
    max_participants: int | None = Field(default=None, gt=0)
    registration_deadline: datetime | None = None
    event_date: datetime | None = None
    venue: str | None = None
    is_active: bool | None = None


class SportItem(BaseModel):
    id: int
    name: str
    category: str
    description: str | None = None
    max_participants: int | None = None
    registration_deadline: datetime | None = None
    event_date: datetime | None = None
    venue: str | None = None
    is_active: bool


class SportListResponse(BaseModel):
    sports: list[SportItem]
