"""Errores de dominio de inscripciones y su correspondencia con códigos HTTP."""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class RegistrationError(Exception):
    """Base de los errores de dominio. `code` viaja en la respuesta JSON."""

    code = "registration_error"

    def __init__(self, message: str, student_ids: list[int] | None = None):
        super().__init__(message)
        self.message = message
        self.student_ids = student_ids or []


class EmptySelectionError(RegistrationError):
    """Se intentó inscribir sin seleccionar estudiantes."""

    code = "empty_selection"


class ScopeViolationError(RegistrationError):
    """El rol del usuario no le permite actuar sobre uno o más estudiantes."""

    code = "scope_violation"


class DuplicateRegistrationError(RegistrationError):
    """El estudiante ya tiene una inscripción en el deporte."""

    code = "duplicate_registration"


class ForbiddenError(RegistrationError):
    """Operación reservada al administrador."""

    code = "forbidden"


class StorageFailureError(RegistrationError):
    """Fallo de la base de datos; la solicitud no se reintenta."""

    code = "storage_failure"


class SportNotFoundError(RegistrationError):
    code = "sport_not_found"


class StudentNotFoundError(RegistrationError):
    code = "student_not_found"


class RegistrationNotFoundError(RegistrationError):
    code = "registration_not_found"


class InvalidStatusTransitionError(RegistrationError):
    """Solo se puede aprobar o rechazar una inscripción pendiente."""

    code = "invalid_status_transition"


# Mapping of domain exceptions to HTTP status codes
CUSTOM_ERRORS = {
    EmptySelectionError: 422,
    ScopeViolationError: status.HTTP_403_FORBIDDEN,
    DuplicateRegistrationError: status.HTTP_409_CONFLICT,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    StorageFailureError: status.HTTP_503_SERVICE_UNAVAILABLE,
    SportNotFoundError: status.HTTP_404_NOT_FOUND,
    StudentNotFoundError: status.HTTP_404_NOT_FOUND,
    RegistrationNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStatusTransitionError: status.HTTP_409_CONFLICT,
}


async def registration_error_handler(request: Request, exc: RegistrationError) -> JSONResponse:
    """Traduce un error de dominio a la respuesta JSON de la API."""
    status_code = CUSTOM_ERRORS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    content = {"detail": exc.message, "error": exc.code}
    if exc.student_ids:
        content["student_ids"] = exc.student_ids
    return JSONResponse(status_code=status_code, content=content)
