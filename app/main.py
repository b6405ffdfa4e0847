"""Punto de entrada de la aplicación FastAPI."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.core.config import settings
from app.core.database import AsyncSessionLocal, init_db
from app.core.exceptions import RegistrationError, registration_error_handler
from app.models import *  # noqa: F401, F403 - Registra modelos en Base.metadata antes de init_db
from app.services.settings_service import ensure_default_settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Documentación Swagger: disponible en /docs (OpenAPI 3.0)
OPENAPI_TAGS = [
    {
        "name": "auth",
        "description": "Autenticación: login con correo y contraseña y registro de coordinadores. Devuelve un JWT.",
    },
    {
        "name": "api",
        "description": "Endpoints generales de la API v1. Incluye rutas protegidas que requieren JWT.",
    },
    {
        "name": "users",
        "description": "Administración de usuarios (administrador y coordinadores por año).",
    },
    {
        "name": "students",
        "description": "Estudiantes por año académico: listado según rol, alta, edición e importación desde Excel.",
    },
    {
        "name": "sports",
        "description": "Deportes por categoría (game / athletic): listado, alta, edición y desactivación.",
    },
    {
        "name": "registrations",
        "description": "Inscripción de estudiantes con control de cupos por categoría, aprobación y baja.",
    },
    {
        "name": "settings",
        "description": "Cupos por categoría, auto-aprobación y registro de nuevos usuarios.",
    },
    {
        "name": "dashboard",
        "description": "Estadísticas del panel principal según el alcance del rol.",
    },
    {
        "name": "reports",
        "description": "Reportes de inscripciones en PDF o CSV.",
    },
    {
        "name": "activity-logs",
        "description": "Bitácora de acciones que modifican datos.",
    },
    {
        "name": "salud",
        "description": "Comprobación del estado del servicio.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestiona el ciclo de vida: inicio y cierre de la aplicación."""
    await init_db()
    async with AsyncSessionLocal() as session:
        await ensure_default_settings(session)
        await session.commit()
    logger.info("%s iniciada", settings.app_name)
    yield


app = FastAPI(
    title=settings.app_name,
    description="""
API REST para la **inscripción de estudiantes en deportes** por año académico.

## Roles

- **admin:** ve a todos los estudiantes, configura cupos, aprueba o rechaza inscripciones.
- **<año>_year_coordinator:** ve e inscribe solo a los estudiantes de su año.

## Autenticación

Todas las rutas, salvo login, registro y /health, exigen el header `Authorization: Bearer <token>`.
El token se obtiene con **POST /api/v1/auth/login**; en Swagger UI se pega (sin "Bearer") en el diálogo **Authorize**.
""",
    version="0.1.0",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True, "tryItOutEnabled": True},
)

app.add_exception_handler(RegistrationError, registration_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get(
    "/health",
    tags=["salud"],
    summary="Estado del servicio",
    response_description="Indica que la API está en ejecución",
)
async def health_check():
    """Comprueba que el servicio está activo. No requiere autenticación."""
    return {"status": "ok", "message": "Servicio en ejecución"}
