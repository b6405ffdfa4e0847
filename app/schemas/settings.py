"""Esquemas de configuración: cupos por categoría, auto-aprobación y registro abierto."""
from pydantic import BaseModel, ConfigDict, Field


class QuotaConfig(BaseModel):
    """Cupos por estudiante y categoría. `None` significa sin límite.

    Es un valor inmutable que se inyecta al evaluador de cupos y al flujo de inscripción.
    """

    model_config = ConfigDict(frozen=True)

    max_game_registrations: int | None = Field(
        default=None, ge=1, description="Máximo de inscripciones de juegos por estudiante (null = sin límite)"
    )
    max_athletic_registrations: int | None = Field(
        default=None, ge=1, description="Máximo de inscripciones de atletismo por estudiante (null = sin límite)"
    )
    auto_approve: bool = Field(
        default=False, description="Las nuevas inscripciones quedan aprobadas sin pasar por pendiente"
    )

    def limit_for(self, category: str) -> int | None:
        """Límite aplicable a la categoría del deporte."""
        if category == "game":
            return self.max_game_registrations
        if category == "athletic":
            return self.max_athletic_registrations
        raise ValueError(f"Categoría desconocida: {category!r}")


class SystemSettings(BaseModel):
    sign_up_enabled: bool = True
