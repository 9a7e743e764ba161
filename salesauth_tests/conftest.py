import pytest
from fastapi.testclient import TestClient

from salesauth.auth_service.auth import PasswordHasher, TokenIssuer
from salesauth.auth_service.config import Settings
from salesauth.auth_service.db import build_engine, build_session_factory, init_db
from salesauth.auth_service.main import create_app
from salesauth.auth_service.service import AuthenticationService
from salesauth.auth_service.store import UserStore

ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'auth.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(
        _env_file=None,
        ACCESS_TOKEN_SECRET=ACCESS_SECRET,
        REFRESH_TOKEN_SECRET=REFRESH_SECRET,
        DATABASE_URL=database_url,
    )


@pytest.fixture
def engine(database_url):
    engine = build_engine(database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return UserStore(session_factory)


@pytest.fixture
def hasher():
    return PasswordHasher()


@pytest.fixture
def tokens():
    return TokenIssuer(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def service(store, hasher, tokens):
    return AuthenticationService(store=store, hasher=hasher, tokens=tokens)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
