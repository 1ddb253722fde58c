import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from hallpass.api.router import api_router
from hallpass.core.config import get_settings
from hallpass.core.errors import HallPassError, hallpass_exception_handler
from hallpass.core.security import hash_password
from hallpass.db.session import get_session_factory
from hallpass.models.staff import Staff

logger = logging.getLogger(__name__)


def _ensure_bootstrap_admin() -> None:
    settings = get_settings()
    session_factory = get_session_factory()
    with session_factory() as db:
        existing = db.scalar(select(Staff).where(Staff.login == settings.bootstrap_admin_login))
        if existing:
            return
        db.add(
            Staff(
                login=settings.bootstrap_admin_login,
                display_name=settings.bootstrap_admin_name,
                password_hash=hash_password(settings.bootstrap_admin_password),
                role="admin",
            )
        )
        db.commit()
    logger.info("Bootstrap admin %s created.", settings.bootstrap_admin_login)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.auto_create_admin:
            _ensure_bootstrap_admin()
        yield

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HallPassError, hallpass_exception_handler)
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()
