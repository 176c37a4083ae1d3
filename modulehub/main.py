import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from modulehub.auth.passwords import build_password_hasher
from modulehub.core.config import Settings, validate_runtime_config
from modulehub.core.errors import register_exception_handlers
from modulehub.database import build_engine, build_session_factory, init_schema
from modulehub.notifications import Notifier, build_notifier
from modulehub.routes import auth_routes, module_info_routes, user_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_schema(app.state.engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None, notifier: Notifier | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    validate_runtime_config(settings)
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title='modulehub', lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.password_hasher = build_password_hasher(settings)
    app.state.notifier = notifier or build_notifier(settings)

    @app.get('/')
    def root():
        return {'status': 'Module Info API Running'}

    register_exception_handlers(app)

    app.include_router(auth_routes.router)
    app.include_router(user_routes.router)
    app.include_router(module_info_routes.public_router)
    app.include_router(module_info_routes.api_router)

    return app

