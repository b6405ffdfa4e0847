"""Seed: deportes de ejemplo y 40 estudiantes ficticios (10 por año académico).

Ejecutar después de seed_usuarios.py. No crea inscripciones: esas las hacen los coordinadores.
"""
import asyncio
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from app.core.database import AsyncSessionLocal
from app.core.roles import ACADEMIC_YEARS
from app.models import Sport, SportCategory, Student, User

random.seed(42)

# ── Datos ficticios ──────────────────────────────────────────────────

NOMBRES = [
    "Carlos", "María", "Juan", "Ana", "Pedro", "Lucía", "Diego", "Sofía",
    "Miguel", "Valentina", "Andrés", "Camila", "José", "Isabella", "Luis",
    "Daniela", "Fernando", "Gabriela", "Ricardo", "Natalia",
]

APELLIDOS = [
    "García", "Rodríguez", "Martínez", "López", "Hernández", "González",
    "Pérez", "Sánchez", "Ramírez", "Torres", "Flores", "Rivera",
]

DEPARTAMENTOS = ["Computer Science", "Mechanical", "Electrical", "Civil", "Electronics"]

DEPORTES = [
    ("Football", SportCategory.GAME, "Main Ground", 22),
    ("Cricket", SportCategory.GAME, "Main Ground", 22),
    ("Basketball", SportCategory.GAME, "Indoor Court", 12),
    ("Volleyball", SportCategory.GAME, "Indoor Court", 12),
    ("Chess", SportCategory.GAME, "Library Hall", None),
    ("100m Sprint", SportCategory.ATHLETIC, "Track", 16),
    ("Long Jump", SportCategory.ATHLETIC, "Track", 16),
    ("Shot Put", SportCategory.ATHLETIC, "Field", 12),
    ("Relay 4x100", SportCategory.ATHLETIC, "Track", 32),
]

ESTUDIANTES_POR_ANIO = 10


async def seed_demo():
    ahora = datetime.now(timezone.utc)
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.role == "admin").limit(1))
        admin = result.scalar_one_or_none()
        if not admin:
            print("No existe un administrador. Ejecute primero scripts/seed_usuarios.py")
            return

        # Deportes
        result = await session.execute(select(Sport.name))
        existentes = set(result.scalars().all())
        for i, (nombre, categoria, sede, cupo) in enumerate(DEPORTES):
            if nombre in existentes:
                continue
            evento = ahora + timedelta(days=30 + i)
            session.add(Sport(
                name=nombre,
                category=categoria,
                venue=sede,
                max_participants=cupo,
                registration_deadline=evento - timedelta(days=7),
                event_date=evento,
                created_by=admin.id,
            ))
            print(f"  + Deporte: {nombre} ({categoria})")

        # Estudiantes
        result = await session.execute(select(Student.roll_number))
        matriculas = set(result.scalars().all())
        creados = 0
        for n_anio, year in enumerate(ACADEMIC_YEARS, start=1):
            for i in range(1, ESTUDIANTES_POR_ANIO + 1):
                roll_number = f"{2026 - n_anio}-{i:03d}"
                if roll_number in matriculas:
                    continue
                session.add(Student(
                    name=f"{random.choice(NOMBRES)} {random.choice(APELLIDOS)}",
                    roll_number=roll_number,
                    department=random.choice(DEPARTAMENTOS),
                    year=year,
                ))
                creados += 1

        await session.commit()
    print(f"Listo. {creados} estudiantes creados.")


if __name__ == "__main__":
    asyncio.run(seed_demo())
