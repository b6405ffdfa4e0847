"""Esquemas para estudiantes (listado, alta, edición e importación masiva)."""
from datetime import datetime

from pydantic import BaseModel, Field

from app.core.roles import AcademicYear


class StudentCreate(BaseModel):
    """Body para crear un estudiante."""

    name: str = Field(description="Nombre completo", min_length=1)
    roll_number: str = Field(description="Número de matrícula (único)", min_length=1)
    department: str = Field(description="Departamento o carrera", min_length=1)
    year: AcademicYear = Field(description="Año académico: first, second, third o fourth")


class StudentUpdate(BaseModel):
    """Body para editar un estudiante. El año académico no se puede cambiar."""

    name: str | None = Field(default=None, min_length=1)
    roll_number: str | None = Field(default=None, min_length=1)
    department: str | None = Field(default=None, min_length=1)


class StudentItem(BaseModel):
    """Fila de la tabla de estudiantes."""

    id: int
    name: str
    roll_number: str
    department: str
    year: str
    created_at: datetime | None = None


class StudentListResponse(BaseModel):
    total: int
    students: list[StudentItem]


# ── Importación masiva ──────────────────────────────────────────────


class ImportErrorItem(BaseModel):
    """Error individual durante la importación de una fila."""

    row: int = Field(description="Número de fila en el Excel (1-indexed, sin contar encabezado)")
    roll_number: str | None = Field(default=None, description="Matrícula (si se pudo leer)")
    message: str = Field(description="Descripción del error")


class StudentImportResponse(BaseModel):
    """Respuesta del endpoint de importación masiva de estudiantes."""

    file_name: str
    total_rows: int
    created: int = 0
    updated: int = 0
    total_errors: int = 0
    errors: list[ImportErrorItem] = Field(default_factory=list)
