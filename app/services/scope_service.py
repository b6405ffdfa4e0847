"""Filtro de alcance por rol: qué estudiantes puede ver o inscribir cada usuario."""
from collections.abc import Callable, Iterable

from sqlalchemy import ColumnElement, true

from app.core.exceptions import ScopeViolationError
from app.core.roles import AdminRole, CoordinatorRole, Role
from app.models.student import Student


def visible_students(role: Role) -> Callable[[Student], bool]:
    """Predicado sobre estudiantes: admin ve todo; un coordinador solo su año."""
    if isinstance(role, AdminRole):
        return lambda student: True
    return lambda student: student.year == role.year


def student_scope_clause(role: Role) -> ColumnElement[bool]:
    """El mismo predicado como condición SQL sobre la tabla students."""
    if isinstance(role, AdminRole):
        return true()
    return Student.year == role.year


def can_act_on(role: Role, student: Student) -> bool:
    return visible_students(role)(student)


def can_register(role: Role, student: Student) -> bool:
    """Solo los coordinadores inscriben, y únicamente a estudiantes de su año.

    El administrador ve a todos pero no realiza inscripciones directas.
    """
    return isinstance(role, CoordinatorRole) and can_act_on(role, student)


def ensure_can_view(role: Role, student: Student) -> None:
    if not can_act_on(role, student):
        raise ScopeViolationError(
            "El estudiante no pertenece al año que coordina",
            student_ids=[student.id],
        )


def ensure_can_register(role: Role, students: Iterable[Student]) -> None:
    """Rechaza la solicitud completa si algún estudiante está fuera del alcance."""
    fuera = [s.id for s in students if not can_register(role, s)]
    if not fuera:
        return
    if isinstance(role, AdminRole):
        mensaje = "El administrador no inscribe estudiantes; la inscripción la realiza el coordinador del año"
    else:
        mensaje = "Uno o más estudiantes no pertenecen al año que coordina"
    raise ScopeViolationError(mensaje, student_ids=fuera)
