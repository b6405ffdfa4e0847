"""Contraseñas (bcrypt) y tokens de acceso (JWT) de administradores y coordinadores."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from app.core.config import settings


@dataclass(frozen=True)
class TokenPayload:
    """Datos que viajan en el JWT. El rol es informativo: el efectivo se lee de la BD."""

    user_id: int
    email: str | None
    role: str | None
    expires_at: datetime


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """False si no hay hash o si el hash guardado no es bcrypt válido."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: int, email: str, role: str) -> str:
    """JWT firmado con sub=user_id, correo y nombre del rol; expira según jwt_expire_minutes."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenPayload | None:
    """Valida firma y expiración. Devuelve None ante cualquier token inválido."""
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
        user_id = int(claims["sub"])
    except (jwt.PyJWTError, ValueError):
        return None
    return TokenPayload(
        user_id=user_id,
        email=claims.get("email"),
        role=claims.get("role"),
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
