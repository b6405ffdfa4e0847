"""Crea el administrador y un coordinador por año académico (contraseña 1234)."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from app.core.database import AsyncSessionLocal, init_db
from app.core.security import hash_password
from app.models import User
from app.services.settings_service import ensure_default_settings

PASSWORD_PLAIN = "1234"

USUARIOS = [
    {"full_name": "Administrador", "email": "admin@sports.edu", "role": "admin"},
    {"full_name": "Coordinador Primer Año", "email": "first@sports.edu", "role": "first_year_coordinator"},
    {"full_name": "Coordinador Segundo Año", "email": "second@sports.edu", "role": "second_year_coordinator"},
    {"full_name": "Coordinador Tercer Año", "email": "third@sports.edu", "role": "third_year_coordinator"},
    {"full_name": "Coordinador Cuarto Año", "email": "fourth@sports.edu", "role": "fourth_year_coordinator"},
]


async def seed_usuarios():
    await init_db()
    password_hash = hash_password(PASSWORD_PLAIN)
    async with AsyncSessionLocal() as session:
        await ensure_default_settings(session)

        for datos in USUARIOS:
            result = await session.execute(select(User).where(User.email == datos["email"]))
            user = result.scalar_one_or_none()
            if not user:
                user = User(password_hash=password_hash, **datos)
                session.add(user)
                await session.flush()
                print(f"  + Usuario creado: {datos['email']} ({datos['role']}, id={user.id})")
            else:
                user.password_hash = password_hash
                user.role = datos["role"]
                print(f"  = Usuario existente, contraseña y rol actualizados: {datos['email']}")

        await session.commit()

    print("Listo. Contraseña de todos los usuarios: " + PASSWORD_PLAIN)
    for u in USUARIOS:
        print(f"  - {u['email']}")


if __name__ == "__main__":
    asyncio.run(seed_usuarios())
