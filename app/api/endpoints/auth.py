"""Endpoints de autenticación: login, registro de coordinadores y dependencias para proteger rutas."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.roles import Role, is_admin
from app.core.security import create_access_token, decode_access_token, hash_password, verify_password
from app.models import User
from app.schemas.auth import LoginRequest, SignUpRequest, TokenResponse
from app.services import settings_service
from app.services.audit_service import AuditAction, record_activity

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Iniciar sesión",
    response_description="Token JWT para usar en el header Authorization",
    responses={
        200: {"description": "Login correcto, se devuelve el access_token"},
        401: {"description": "Correo o contraseña incorrectos"},
        403: {"description": "Usuario inactivo"},
    },
)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Autenticación con **correo** y **contraseña**.
    Si las credenciales son correctas, devuelve un **access_token** (JWT) que incluye el rol.
    """
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(data.password, user.password_hash or ""):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Correo o contraseña incorrectos",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo. Contacte al administrador.",
        )
    record_activity(db, user.id, AuditAction.USER_LOGIN, {"email": user.email})
    token = create_access_token(user.id, user.email, user.role)
    return TokenResponse(access_token=token, role=user.role)


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registro de coordinador",
    responses={
        400: {"description": "Ya existe un usuario con ese correo"},
        403: {"description": "El registro de nuevos usuarios está deshabilitado"},
    },
)
async def signup(data: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """Crea una cuenta de coordinador si la configuración `sign_up_enabled` lo permite."""
    system = await settings_service.get_system_settings(db)
    if not system.sign_up_enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="El registro de nuevos usuarios está deshabilitado",
        )
    r = await db.execute(select(User).where(User.email == data.email))
    if r.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ya existe un usuario con ese correo",
        )
    user = User(
        email=data.email,
        full_name=data.full_name,
        password_hash=hash_password(data.password),
        role=data.role,
    )
    db.add(user)
    await db.flush()
    record_activity(db, user.id, AuditAction.USER_CREATED, {"email": user.email, "role": user.role})
    token = create_access_token(user.id, user.email, user.role)
    return TokenResponse(access_token=token, role=user.role)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependencia: exige un JWT válido y devuelve el usuario actual. Usar en endpoints protegidos."""
    if not credentials or credentials.scheme != "Bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de autenticación no proporcionado o inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido o expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    result = await db.execute(select(User).where(User.id == payload.user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no encontrado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo. Contacte al administrador.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_role(current_user: User = Depends(get_current_user)) -> Role:
    """Dependencia: rol tipado del usuario autenticado (se lee de la BD, no del token)."""
    try:
        return current_user.role_value
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"El usuario tiene un rol no reconocido: {current_user.role}",
        )


def require_admin(
    current_user: User = Depends(get_current_user),
    role: Role = Depends(get_current_role),
) -> User:
    """Dependencia que exige el rol administrador."""
    if not is_admin(role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Operación reservada al administrador",
        )
    return current_user
