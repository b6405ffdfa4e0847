"""Endpoints de estudiantes (listado por rol, alta, edición, baja e importación desde Excel)."""
from io import BytesIO
from typing import Annotated

import pandas as pd
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_current_role, require_admin
from app.core.database import get_db
from app.core.roles import ACADEMIC_YEARS, Role
from app.models import Registration, Student, User
from app.schemas.student import (
    ImportErrorItem,
    StudentCreate,
    StudentImportResponse,
    StudentItem,
    StudentListResponse,
    StudentUpdate,
)
from app.services import scope_service
from app.services.audit_service import AuditAction, record_activity

router = APIRouter(prefix="/students", tags=["students"])


def _to_item(s: Student) -> StudentItem:
    return StudentItem(
        id=s.id,
        name=s.name,
        roll_number=s.roll_number,
        department=s.department,
        year=s.year,
        created_at=s.created_at,
    )


async def _roll_number_taken(db: AsyncSession, roll_number: str, exclude_id: int | None = None) -> bool:
    q = select(Student.id).where(Student.roll_number == roll_number)
    if exclude_id is not None:
        q = q.where(Student.id != exclude_id)
    r = await db.execute(q)
    return r.first() is not None


@router.get(
    "",
    response_model=StudentListResponse,
    summary="Listar estudiantes",
    description="Admin ve todos los estudiantes; un coordinador solo los de su año.",
)
async def list_students(
    db: AsyncSession = Depends(get_db),
    role: Role = Depends(get_current_role),
    search: Annotated[str | None, Query(description="Nombre, matrícula o departamento")] = None,
    year: Annotated[str | None, Query(description="first, second, third o fourth")] = None,
):
    q = (
        select(Student)
        .where(scope_service.student_scope_clause(role))
        .order_by(Student.created_at.desc(), Student.id.desc())
    )
    if year:
        q = q.where(Student.year == year)
    if search:
        patron = f"%{search.lower()}%"
        q = q.where(
            or_(
                func.lower(Student.name).like(patron),
                func.lower(Student.roll_number).like(patron),
                func.lower(Student.department).like(patron),
            )
        )
    result = await db.execute(q)
    students = result.scalars().all()
    return StudentListResponse(total=len(students), students=[_to_item(s) for s in students])


@router.get("/{student_id}", response_model=StudentItem, summary="Detalle de estudiante")
async def get_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    role: Role = Depends(get_current_role),
):
    student = await db.get(Student, student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Estudiante no encontrado")
    scope_service.ensure_can_view(role, student)
    return _to_item(student)


@router.post(
    "",
    response_model=StudentItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear estudiante",
)
async def create_student(
    body: StudentCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    if await _roll_number_taken(db, body.roll_number):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ya existe un estudiante con matrícula '{body.roll_number}'",
        )
    student = Student(**body.model_dump())
    db.add(student)
    await db.flush()
    record_activity(
        db, admin.id, AuditAction.STUDENT_CREATED,
        {"student_id": student.id, "student_name": student.name, "roll_number": student.roll_number},
    )
    return _to_item(student)


@router.patch(
    "/{student_id}",
    response_model=StudentItem,
    summary="Actualizar estudiante",
    description="Modifica nombre, matrícula o departamento. El año académico no se puede cambiar.",
)
async def update_student(
    student_id: int,
    body: StudentUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    student = await db.get(Student, student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Estudiante no encontrado")
    cambios = body.model_dump(exclude_none=True)
    if "roll_number" in cambios and await _roll_number_taken(db, cambios["roll_number"], student_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ya existe un estudiante con matrícula '{cambios['roll_number']}'",
        )
    for campo, valor in cambios.items():
        setattr(student, campo, valor)
    await db.flush()
    record_activity(db, admin.id, AuditAction.STUDENT_UPDATED, {"student_id": student.id, **cambios})
    return _to_item(student)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar estudiante",
    description="Elimina al estudiante junto con todas sus inscripciones.",
)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    student = await db.get(Student, student_id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Estudiante no encontrado")
    nombre = student.name
    await db.execute(delete(Registration).where(Registration.student_id == student_id))
    await db.delete(student)
    record_activity(
        db, admin.id, AuditAction.STUDENT_DELETED, {"student_id": student_id, "student_name": nombre}
    )


# ── Importación masiva ──────────────────────────────────────────────

_COLUMNAS_OBLIGATORIAS = {"Name", "Roll Number", "Department", "Year"}

_YEAR_ALIASES = {
    "1": "first", "2": "second", "3": "third", "4": "fourth",
    "first year": "first", "second year": "second", "third year": "third", "fourth year": "fourth",
}


def _val(row, col):
    """Devuelve el valor de la celda como string limpio, o None si está vacío/NaN."""
    v = row.get(col)
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return None
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    s = str(v).strip()
    return s if s else None


def _normalizar_year(valor: str | None) -> str | None:
    if not valor:
        return None
    v = valor.lower()
    v = _YEAR_ALIASES.get(v, v)
    return v if v in ACADEMIC_YEARS else None


@router.post(
    "/import",
    response_model=StudentImportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Importar estudiantes desde Excel",
    description=(
        "Sube un archivo .xlsx con columnas Name, Roll Number, Department y Year. "
        "Crea los estudiantes nuevos y actualiza nombre/departamento de los existentes "
        "(por matrícula). El año de un estudiante existente nunca se modifica."
    ),
)
async def import_students(
    file: UploadFile = File(..., description="Archivo Excel (.xlsx)"),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    file_name = file.filename or "sin_nombre"
    if not file_name.lower().endswith(".xlsx"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El archivo debe tener extensión .xlsx",
        )

    contenido = await file.read()
    try:
        df = pd.read_excel(BytesIO(contenido), engine="openpyxl")
    except (ValueError, OSError, KeyError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No se pudo leer el archivo. Verifique que sea un Excel válido (.xlsx).",
        ) from exc

    if df.empty:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El archivo Excel está vacío.")

    df.columns = [str(c).strip() for c in df.columns]
    faltantes = _COLUMNAS_OBLIGATORIAS - set(df.columns)
    if faltantes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Faltan columnas obligatorias: {', '.join(sorted(faltantes))}",
        )

    res = await db.execute(select(Student))
    cache: dict[str, Student] = {s.roll_number: s for s in res.scalars().all()}

    errores: list[ImportErrorItem] = []
    creados = 0
    actualizados = 0
    for idx, row in df.iterrows():
        fila = int(idx) + 1
        roll_number = _val(row, "Roll Number")
        name = _val(row, "Name")
        department = _val(row, "Department")
        year = _normalizar_year(_val(row, "Year"))

        if not roll_number or not name or not department:
            errores.append(ImportErrorItem(row=fila, roll_number=roll_number, message="Faltan datos obligatorios"))
            continue

        existente = cache.get(roll_number)
        if existente is not None:
            if year and year != existente.year:
                errores.append(ImportErrorItem(
                    row=fila,
                    roll_number=roll_number,
                    message=f"El estudiante ya existe en el año '{existente.year}'; el año no se puede cambiar",
                ))
                continue
            existente.name = name
            existente.department = department
            actualizados += 1
            continue

        if not year:
            errores.append(ImportErrorItem(
                row=fila, roll_number=roll_number, message="Year debe ser first, second, third o fourth"
            ))
            continue
        student = Student(name=name, roll_number=roll_number, department=department, year=year)
        db.add(student)
        cache[roll_number] = student
        creados += 1

    await db.flush()
    record_activity(
        db, admin.id, AuditAction.STUDENTS_IMPORTED,
        {"file_name": file_name, "created": creados, "updated": actualizados, "errors": len(errores)},
    )
    return StudentImportResponse(
        file_name=file_name,
        total_rows=len(df),
        created=creados,
        updated=actualizados,
        total_errors=len(errores),
        errors=errores,
    )
