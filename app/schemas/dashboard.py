"""Esquema de las estadísticas del panel principal."""
from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    total_students: int
    total_sports: int = Field(description="Deportes activos")
    total_registrations: int
    pending_registrations: int
    approved_registrations: int
    rejected_registrations: int
    recent_activity: int
