"""Esquemas para listado y creación de usuarios."""
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.roles import ROLE_NAMES


def _validar_rol(v: str | None) -> str | None:
    if v is not None and v not in ROLE_NAMES:
        raise ValueError(f"role debe ser uno de: {', '.join(ROLE_NAMES)}")
    return v


class UserCreate(BaseModel):
    """Body para crear un usuario (solo administrador)."""

    email: EmailStr = Field(description="Correo electrónico (único)")
    full_name: str = Field(description="Nombre completo", min_length=1)
    password: str = Field(description="Contraseña en texto", min_length=6)
    role: str = Field(description="admin o <año>_year_coordinator")

    @field_validator("role")
    @classmethod
    def role_valido(cls, v: str) -> str:
        return _validar_rol(v)


class UserUpdate(BaseModel):
    """Body para cambiar nombre, rol o estado. Todos opcionales."""

    full_name: str | None = Field(default=None, min_length=1)
    role: str | None = Field(default=None, description="Nuevo rol. Si no se envía, no se modifica.")
    is_active: bool | None = Field(default=None, description="Activar o desactivar la cuenta")

    @field_validator("role")
    @classmethod
    def role_valido(cls, v: str | None) -> str | None:
        return _validar_rol(v)


class UserItem(BaseModel):
    """Fila de usuario en el listado."""

    id: int
    email: str
    full_name: str
    role: str
    role_label: str
    is_active: bool


class UserListResponse(BaseModel):
    users: list[UserItem]


class MeResponse(UserItem):
    """Usuario autenticado, con el año que coordina (null para admin)."""

    year: str | None = None
