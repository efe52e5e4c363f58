"""Tests for :func:`artist_manager.factory.create_app`."""

from unittest import TestCase, mock

import pytest
from fastapi.testclient import TestClient

from .. import config
from ..exceptions import ConfigurationError
from ..factory import create_app
from .util import SECRET, fake_mail


class TestCreateApp(TestCase):
    """Configuration checks made while building the app."""

    @mock.patch.object(config, 'JWT_SECRET_IS_SET', False)
    def test_generated_secret_in_production(self):
        """Production refuses a secret that was not configured."""
        with self.assertRaises(ConfigurationError):
            create_app(mail=fake_mail(), ENVIRONMENT='production')

    def test_empty_secret(self):
        with self.assertRaises(ConfigurationError):
            create_app(mail=fake_mail(), JWT_SECRET='')

    def test_configured_secret_in_production(self):
        app = create_app(mail=fake_mail(), ENVIRONMENT='production',
                         JWT_SECRET=SECRET)
        self.assertEqual(app.extra['JWT_SECRET'], SECRET)
        self.assertEqual(app.extra['COOKIE_NAME'], 'accessToken')


def test_startup_and_shutdown(tmp_path):
    """Startup selects the database and creates the schema; shutdown closes."""
    mail = fake_mail(success=False)
    app = create_app(mail=mail, DATABASE_URL='sqlite://',
                     DB_NAME=str(tmp_path / 'app.db'), JWT_SECRET=SECRET)
    db = app.extra['db']
    with TestClient(app) as client:
        assert db.current_database == str(tmp_path / 'app.db')
        assert db.execute('SELECT COUNT(*) FROM users').scalar() == 0
        mail.verify.assert_called_once()

        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.json()['success'] is True
    assert db.current_database is None


def test_health_without_database(client, app):
    with mock.patch.object(app.extra['db'], 'ping', return_value=False):
        response = client.get('/api/health')
    assert response.status_code == 503
    assert response.json()['success'] is False


def test_response_headers(client):
    response = client.get('/api/health')
    assert response.headers['X-Frame-Options'] == 'DENY'
    assert response.headers['Content-Security-Policy'] == "frame-ancestors 'none'"


def test_cors(client):
    response = client.options('/api/health', headers={
        'Origin': 'http://front.end',
        'Access-Control-Request-Method': 'GET',
    })
    assert response.headers['access-control-allow-origin'] == 'http://front.end'
    assert response.headers['access-control-allow-credentials'] == 'true'


@pytest.mark.parametrize('path', ['/api/user/profile', '/api/artists/',
                                  '/api/songs/1'])
def test_routes_need_session(client, path):
    assert client.get(path).status_code == 403


def test_startup_work_leaves_event_loop(tmp_path):
    """Blocking startup and shutdown calls are handed to the threadpool."""
    offloaded = []

    async def run_in_threadpool(func, *args):
        offloaded.append(func)
        return func(*args)

    app = create_app(mail=fake_mail(), DATABASE_URL='sqlite://',
                     DB_NAME=str(tmp_path / 'app.db'), JWT_SECRET=SECRET)
    db, mail = app.extra['db'], app.extra['mail']
    with mock.patch('artist_manager.factory.run_in_threadpool',
                    side_effect=run_in_threadpool):
        with TestClient(app):
            pass
    assert offloaded == [db.ensure_database, db.select_database,
                         db.initialize_schema, mail.verify, db.close]
