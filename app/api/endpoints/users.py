"""Endpoints para listado, creación y edición de usuarios (solo administrador)."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import require_admin
from app.core.database import get_db
from app.core.roles import parse_role
from app.core.security import hash_password
from app.models import User
from app.schemas.user import UserCreate, UserItem, UserListResponse, UserUpdate
from app.services.audit_service import AuditAction, record_activity

router = APIRouter(prefix="/users", tags=["users"])


def _to_item(u: User) -> UserItem:
    return UserItem(
        id=u.id,
        email=u.email,
        full_name=u.full_name,
        role=u.role,
        role_label=parse_role(u.role).label,
        is_active=u.is_active,
    )


@router.get(
    "",
    response_model=UserListResponse,
    summary="Listar usuarios",
)
async def list_users(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    result = await db.execute(select(User).order_by(User.full_name))
    return UserListResponse(users=[_to_item(u) for u in result.scalars().all()])


@router.post(
    "",
    response_model=UserItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear usuario",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Crea un administrador o coordinador con la contraseña indicada."""
    r = await db.execute(select(User).where(User.email == body.email))
    if r.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ya existe un usuario con ese correo",
        )
    user = User(
        email=body.email,
        full_name=body.full_name,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(user)
    await db.flush()
    record_activity(db, admin.id, AuditAction.USER_CREATED, {"user_id": user.id, "role": user.role})
    return _to_item(user)


@router.patch(
    "/{user_id}",
    response_model=UserItem,
    summary="Actualizar usuario",
    description="Cambia nombre, rol y/o estado. Solo los campos enviados se modifican.",
)
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    if user.id == admin.id and (body.is_active is False or (body.role and body.role != user.role)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No puede desactivarse ni cambiar su propio rol",
        )

    cambios = body.model_dump(exclude_none=True)
    for campo, valor in cambios.items():
        setattr(user, campo, valor)
    await db.flush()
    record_activity(db, admin.id, AuditAction.USER_UPDATED, {"user_id": user.id, **cambios})
    return _to_item(user)
