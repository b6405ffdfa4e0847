"""Esquemas para autenticación y JWT."""
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.roles import ROLE_ADMIN, ROLE_NAMES


class LoginRequest(BaseModel):
    """Body del endpoint de login."""

    email: EmailStr = Field(description="Correo electrónico del usuario", examples=["admin@college.edu"])
    password: str = Field(description="Contraseña en texto plano", min_length=1, examples=["1234"])


class SignUpRequest(BaseModel):
    """Body del registro de un coordinador (solo si sign_up_enabled está activo)."""

    email: EmailStr = Field(description="Correo electrónico (único)")
    password: str = Field(description="Contraseña en texto plano", min_length=6)
    full_name: str = Field(description="Nombre completo", min_length=1)
    role: str = Field(
        default="first_year_coordinator",
        description="Rol de coordinador solicitado. El rol admin no se puede auto-asignar.",
    )

    @field_validator("role")
    @classmethod
    def rol_coordinador(cls, v: str) -> str:
        if v not in ROLE_NAMES or v == ROLE_ADMIN:
            raise ValueError("role debe ser un rol de coordinador")
        return v


class TokenResponse(BaseModel):
    """Respuesta con access_token JWT y datos del usuario."""

    access_token: str = Field(description="Token JWT para enviar en header Authorization: Bearer <token>")
    token_type: str = Field(default="bearer", description="Tipo de token (siempre 'bearer')")
    role: str = Field(description="Rol del usuario autenticado")
