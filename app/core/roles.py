"""Roles del sistema: administrador y coordinadores por año académico.

El rol se guarda como texto en `users.role` y se convierte con una tabla
explícita; nunca se deriva el año recortando el nombre del rol.
"""
from dataclasses import dataclass
from typing import Literal

AcademicYear = Literal["first", "second", "third", "fourth"]
ACADEMIC_YEARS: tuple[AcademicYear, ...] = ("first", "second", "third", "fourth")

YEAR_LABELS = {
    "first": "First Year",
    "second": "Second Year",
    "third": "Third Year",
    "fourth": "Fourth Year",
}


@dataclass(frozen=True)
class AdminRole:
    """Acceso a todos los estudiantes; aprueba, rechaza y elimina inscripciones."""

    @property
    def label(self) -> str:
        return "Administrator"


@dataclass(frozen=True)
class CoordinatorRole:
    """Coordinador de un año académico: solo ve e inscribe estudiantes de su año."""

    year: AcademicYear

    @property
    def label(self) -> str:
        return f"{YEAR_LABELS[self.year]} Coordinator"


Role = AdminRole | CoordinatorRole

ROLE_ADMIN = "admin"

_ROLES_BY_NAME: dict[str, Role] = {
    ROLE_ADMIN: AdminRole(),
    "first_year_coordinator": CoordinatorRole("first"),
    "second_year_coordinator": CoordinatorRole("second"),
    "third_year_coordinator": CoordinatorRole("third"),
    "fourth_year_coordinator": CoordinatorRole("fourth"),
}
_NAMES_BY_ROLE: dict[Role, str] = {role: name for name, role in _ROLES_BY_NAME.items()}

ROLE_NAMES: tuple[str, ...] = tuple(_ROLES_BY_NAME)


def parse_role(name: str) -> Role:
    """Convierte el texto guardado en BD al rol tipado."""
    try:
        return _ROLES_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Rol desconocido: {name!r}") from None


def role_name(role: Role) -> str:
    """Texto con el que se persiste el rol."""
    return _NAMES_BY_ROLE[role]


def is_admin(role: Role) -> bool:
    return isinstance(role, AdminRole)
