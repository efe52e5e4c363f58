"""Special pytest fixture configuration file.

This file automatically provides all fixtures defined in it to all
pytest tests in this directory and sub directories.
"""
import pytest

from fastapi.testclient import TestClient

from .auth import tokens
from .controllers.accounts import AccountService
from .controllers.artists import ArtistService
from .controllers.songs import SongService
from .domain import Role
from .factory import create_app
from .services.accounts import AccountRepository
from .services.artists import ArtistRepository
from .services.database import ConnectionManager
from .services.songs import SongRepository
from .tests.util import SECRET, fake_mail, verified_account


@pytest.fixture
def db(tmp_path):
    manager = ConnectionManager('sqlite://', retry_interval=0)
    manager.select_database(str(tmp_path / 'test.db'))
    manager.initialize_schema()
    yield manager
    manager.close()


@pytest.fixture
def mail():
    return fake_mail()


@pytest.fixture
def account_service(db, mail):
    return AccountService(AccountRepository(db), ArtistRepository(db), mail,
                          SECRET, frontend_url='http://front.end')


@pytest.fixture
def artist_service(db):
    return ArtistService(ArtistRepository(db), AccountRepository(db))


@pytest.fixture
def song_service(db):
    return SongService(SongRepository(db), ArtistRepository(db))


@pytest.fixture
def app(tmp_path, mail):
    return create_app(mail=mail,
                      DATABASE_URL='sqlite://',
                      DB_NAME=str(tmp_path / 'app.db'),
                      DB_RETRY_INTERVAL=0,
                      JWT_SECRET=SECRET,
                      ENVIRONMENT='test',
                      FRONTEND_URL='http://front.end',
                      LOG_LEVEL='WARNING')


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client, app):
    """Set a session cookie on ``client`` for a new verified account."""
    def _login(role: Role, email: str) -> int:
        account_id = verified_account(app.extra['accounts'], email, role)
        client.cookies.set('accessToken',
                           tokens.encode_session(account_id, email, role, SECRET))
        return account_id
    return _login
