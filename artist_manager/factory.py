"""Application factory."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from . import config
from .app_logging import setup_logger
from .controllers.accounts import AccountService
from .controllers.artists import ArtistService
from .controllers.songs import SongService
from .exceptions import ArtistManagerError, ConfigurationError, InternalError
from .routes.artists import router as artists_router
from .routes.health import router as health_router
from .routes.songs import router as songs_router
from .routes.users import router as users_router
from .services.accounts import AccountRepository
from .services.artists import ArtistRepository
from .services.database import ConnectionManager
from .services.mail import MailDispatcher
from .services.songs import SongRepository

logger = logging.getLogger(__name__)

SETTINGS = (
    'DATABASE_URL', 'DB_NAME', 'DB_CONNECTION_LIMIT', 'DB_CONNECT_TIMEOUT',
    'DB_IDLE_TIMEOUT', 'DB_RETRY_INTERVAL', 'DB_MAX_RETRIES',
    'MAIL_HOST', 'MAIL_PORT', 'MAIL_FROM',
    'JWT_SECRET', 'SESSION_DURATION', 'COOKIE_NAME', 'COOKIE_MAX_AGE',
    'ENVIRONMENT', 'FRONTEND_URL', 'CORS_ORIGINS', 'LOG_LEVEL',
)

origins = ['http://localhost',
           'http://localhost:3000',
           'http://localhost:5173']


@asynccontextmanager
async def lifespan(app: FastAPI):
    db: ConnectionManager = app.extra['db']
    await run_in_threadpool(db.ensure_database, app.extra['DB_NAME'])
    await run_in_threadpool(db.select_database, app.extra['DB_NAME'])
    await run_in_threadpool(db.initialize_schema)
    if not await run_in_threadpool(app.extra['mail'].verify):
        logger.warning('Mail server is not reachable; mail will fail until it is')
    yield
    await run_in_threadpool(db.close)


def create_app(db: Optional[ConnectionManager] = None,
               mail: Optional[MailDispatcher] = None,
               **overrides: Any) -> FastAPI:
    """Build the application.

    Settings come from :mod:`artist_manager.config`; any of them may be
    overridden by keyword. ``db`` and ``mail`` replace the connection manager
    and mail dispatcher that would otherwise be built from those settings.
    """
    settings = {key: getattr(config, key) for key in SETTINGS}
    settings.update(overrides)
    setup_logger(settings['LOG_LEVEL'])

    secret_is_set = config.JWT_SECRET_IS_SET or 'JWT_SECRET' in overrides
    if not settings['JWT_SECRET'] or \
            (settings['ENVIRONMENT'] == 'production' and not secret_is_set):
        logger.error('JWT_SECRET needs to be set correctly.')
        raise ConfigurationError('JWT_SECRET is not set correctly.')

    logger.info('ENVIRONMENT: %s', settings['ENVIRONMENT'])
    logger.info('DB_NAME: %s', settings['DB_NAME'])
    logger.info('COOKIE_NAME: %s', settings['COOKIE_NAME'])
    logger.info('SESSION_DURATION: %s', settings['SESSION_DURATION'])

    if db is None:
        db = ConnectionManager(settings['DATABASE_URL'],
                               connection_limit=settings['DB_CONNECTION_LIMIT'],
                               connect_timeout=settings['DB_CONNECT_TIMEOUT'],
                               idle_timeout=settings['DB_IDLE_TIMEOUT'],
                               retry_interval=settings['DB_RETRY_INTERVAL'],
                               max_retries=settings['DB_MAX_RETRIES'])
    if mail is None:
        mail = MailDispatcher(settings['MAIL_HOST'], settings['MAIL_PORT'],
                              sender=settings['MAIL_FROM'])

    accounts = AccountRepository(db)
    artists = ArtistRepository(db)
    songs = SongRepository(db)

    app = FastAPI(
        lifespan=lifespan,
        db=db,
        mail=mail,
        accounts=AccountService(
            accounts, artists, mail, settings['JWT_SECRET'],
            frontend_url=settings['FRONTEND_URL'],
            session_duration=timedelta(hours=settings['SESSION_DURATION'])
        ),
        artists=ArtistService(artists, accounts),
        songs=SongService(songs, artists),
        **settings
    )

    allowed = list(origins)
    if settings['FRONTEND_URL']:
        allowed.append(settings['FRONTEND_URL'].rstrip('/'))
    if settings['CORS_ORIGINS']:
        for cors_origin in settings['CORS_ORIGINS'].split(','):
            allowed.append(cors_origin.strip())
    logger.info('cors origins: %s', ','.join(allowed))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.include_router(users_router, prefix='/api/user')
    app.include_router(artists_router, prefix='/api/artists')
    app.include_router(songs_router, prefix='/api/songs')
    app.include_router(health_router, prefix='/api/health')

    @app.middleware('http')
    async def apply_response_headers(request: Request, call_next: Callable) -> Response:
        """Apply response headers to all responses.
           Prevent UI redress attacks.
        """
        response: Response = await call_next(request)
        response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    @app.exception_handler(ArtistManagerError)
    async def handle_error(request: Request, exc: ArtistManagerError) -> JSONResponse:
        if isinstance(exc, InternalError):
            logger.error('Internal error on %s: %s', request.url.path, exc,
                         exc_info=exc)
            message = 'Internal server error'
        else:
            message = str(exc)
        return JSONResponse(status_code=exc.status_code,
                            content={'success': False, 'message': message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation(request: Request,
                                exc: RequestValidationError) -> JSONResponse:
        errors = [{'field': '.'.join(str(part) for part in error['loc'][1:]),
                   'message': error['msg']} for error in exc.errors()]
        return JSONResponse(status_code=400,
                            content={'success': False,
                                     'message': 'Validation failed',
                                     'errors': errors})

    return app
