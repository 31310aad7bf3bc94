import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bilemo.core.config import (
    ADMIN_EMAIL,
    ADMIN_NAME,
    ADMIN_PASSWORD,
    CORS_ORIGINS,
    DATABASE_URL,
)
from bilemo.core.database import Base, SessionLocal, engine
from bilemo.core.errors import register_exception_handlers
from bilemo.core.logging_setup import configure_logging
from bilemo.core.startup_checks import ensure_migrations_applied, validate_database_environment
from bilemo.middleware.observability import ObservabilityMiddleware
import bilemo.models  # garante que os models são importados antes do create_all

from bilemo.models.customer import Customer
from bilemo.services.admin_bootstrap import ensure_customers_table, upsert_admin_customer
from bilemo.routers.auth import router as auth_router
from bilemo.routers.customers import router as customers_router
from bilemo.routers.phones import router as phones_router
from bilemo.routers.users import router as users_router

configure_logging()

logger = logging.getLogger(__name__)
BOOTSTRAP_PREFIX = "[ADMIN_BOOTSTRAP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="BileMo API",
    description="Catálogo de telefones BileMo para clientes B2B.",
    lifespan=lifespan,
    docs_url="/api/doc",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)
register_exception_handlers(app)


def _bootstrap_initial_admin() -> None:
    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        logger.info("%s skipped: configure ADMIN_EMAIL and ADMIN_PASSWORD.", BOOTSTRAP_PREFIX)
        return

    logger.info("%s start email=%s", BOOTSTRAP_PREFIX, ADMIN_EMAIL)
    ensure_customers_table(engine)

    db = SessionLocal()
    try:
        existing = db.query(Customer).filter(Customer.email == ADMIN_EMAIL).first()
        if existing and existing.is_admin():
            logger.info("%s exists id=%s email=%s", BOOTSTRAP_PREFIX, existing.id, existing.email)
            return

        # só promove/cria; a senha de um admin existente não é tocada aqui
        admin, created = upsert_admin_customer(
            db,
            email=ADMIN_EMAIL,
            password=None if existing else ADMIN_PASSWORD,
            name=ADMIN_NAME,
        )
        logger.info(
            "%s %s id=%s email=%s",
            BOOTSTRAP_PREFIX,
            "created" if created else "promoted",
            admin.id,
            admin.email,
        )
    except Exception:
        logger.exception("%s ERROR bootstrap failed", BOOTSTRAP_PREFIX)
        raise
    finally:
        db.close()


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        if DATABASE_URL.startswith("sqlite"):
            # Cria tabelas (dev). Em produção, use migrations.
            Base.metadata.create_all(bind=engine)
        else:
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        _bootstrap_initial_admin()
    except Exception:
        logger.exception("%s ERROR startup failed", BOOTSTRAP_PREFIX)
        raise


# Routers
app.include_router(auth_router)
app.include_router(phones_router)
app.include_router(customers_router)
app.include_router(users_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
