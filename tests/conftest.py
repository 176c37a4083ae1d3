import pytest
from fastapi.testclient import TestClient

from modulehub.auth.passwords import build_password_hasher
from modulehub.core.config import Settings
from modulehub.database import build_engine, build_session_factory, init_schema
from modulehub.main import create_app
from modulehub.notifications import Notifier
from modulehub.store import UserStore


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send_activation(self, email: str, name: str, link: str) -> None:
        self.sent.append((email, name, link))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url='sqlite://',
        jwt_secret_key='test-secret-key-with-enough-length-for-hs256',
        argon2_time_cost=1,
        argon2_memory_cost=1024,
        argon2_parallelism=1,
        activation_base_url='http://testserver',
        log_level='WARNING',
    )


@pytest.fixture
def hasher(settings: Settings):
    return build_password_hasher(settings)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(settings: Settings, notifier: RecordingNotifier):
    return create_app(settings, notifier=notifier)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    """Session on the same in-memory database the client talks to."""
    db = app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store():
    engine = build_engine('sqlite://')
    init_schema(engine)
    db = build_session_factory(engine)()
    try:
        yield UserStore(db)
    finally:
        db.close()
        engine.dispose()
