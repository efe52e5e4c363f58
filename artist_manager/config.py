"""Application configuration, read from the environment."""
import os
import secrets

from sqlalchemy.engine import URL

#################### Database ####################
DB_HOST = os.environ.get('DB_HOST', 'localhost')
DB_USER = os.environ.get('DB_USER', 'username')
DB_PASSWORD = os.environ.get('DB_PASSWORD', 'my_strong_password')
DB_PORT = int(os.environ.get('DB_PORT', '3306'))

DATABASE_URL = os.environ.get(
    'DATABASE_URL',
    URL.create('mysql+mysqldb', username=DB_USER, password=DB_PASSWORD,
               host=DB_HOST, port=DB_PORT).render_as_string(hide_password=False)
)
"""Server-level URL, without a database name.

The database itself is chosen with ``DB_NAME`` at startup. For local
development ``sqlite://`` works, in which case ``DB_NAME`` is a file path.
"""

DB_NAME = os.environ.get('DB_NAME', 'artist-manager')

DB_CONNECTION_LIMIT = int(os.environ.get('DB_CONNECTION_LIMIT', '10'))
DB_CONNECT_TIMEOUT = int(os.environ.get('DB_CONNECT_TIMEOUT', '30'))
"""Seconds to wait for a new connection."""

DB_IDLE_TIMEOUT = int(os.environ.get('DB_IDLE_TIMEOUT', '60'))
"""Seconds after which a pooled connection is recycled."""

DB_RETRY_INTERVAL = float(os.environ.get('DB_RETRY_INTERVAL', '5'))
"""Seconds between attempts when a statement hits a transient failure."""

DB_MAX_RETRIES = int(os.environ.get('DB_MAX_RETRIES', '3'))


#################### Mail ####################
MAIL_HOST = os.environ.get('MAIL_HOST', 'localhost')
MAIL_PORT = int(os.environ.get('MAIL_PORT', '1025'))
MAIL_FROM = os.environ.get('MAIL_FROM', '"No Reply" <no-reply@example.com>')


#################### Sessions ####################
JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(16))
"""Secret used to sign session tokens.

When unset a random secret is generated, which invalidates every session on
restart. That is refused in production.
"""

JWT_SECRET_IS_SET = 'JWT_SECRET' in os.environ

SESSION_DURATION = int(os.environ.get('SESSION_DURATION', '5'))
"""Hours a session token stays valid."""

COOKIE_NAME = os.environ.get('COOKIE_NAME', 'accessToken')
COOKIE_MAX_AGE = int(os.environ.get('COOKIE_MAX_AGE', str(2 * 24 * 60 * 60)))
"""Cookie lifetime in seconds. Longer than the token it carries."""


#################### App ####################
ENVIRONMENT = os.environ.get('ENVIRONMENT', 'development')
FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')
"""Base URL used to build verification and password reset links."""

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
