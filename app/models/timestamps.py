"""Valores por defecto de fechas para las columnas created_at/updated_at."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
