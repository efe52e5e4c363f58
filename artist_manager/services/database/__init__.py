"""
Shared access to the relational store.

:class:`ConnectionManager` owns two SQLAlchemy engines: one bound to the
database server (used to create databases) and one bound to the selected
database. Statements go through :meth:`ConnectionManager.execute`, which
retries transient connection failures: dispose the pool, wait, try again.

Constraint violations and other non-transient errors are not retried.
"""

import logging
import re
import threading
import time
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeout,
)

from ...exceptions import (
    ConfigurationError,
    Conflict,
    InternalError,
    ServiceUnavailable,
)
from .schema import metadata

logger = logging.getLogger(__name__)

DATABASE_NAME = re.compile(r'^[A-Za-z0-9_\-]+$')

TRANSIENT_MYSQL_CODES = {
    1040,  # too many connections
    1205,  # lock wait timeout
    1213,  # deadlock
    2002,  # can't connect through socket
    2003,  # can't connect to server
    2006,  # server has gone away
    2013,  # lost connection during query
    2055,  # lost connection, system error
}

TRANSIENT_MESSAGES = (
    'gone away',
    'lost connection',
    'connection refused',
    'timed out',
    'database is locked',
)


class QueryResult(NamedTuple):
    """Materialized result of a statement."""

    rows: List[Dict[str, Any]]
    rowcount: int = 0
    lastrowid: Optional[int] = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None

    def scalar(self) -> Any:
        row = self.first()
        if row is None:
            return None
        return next(iter(row.values()))


def is_transient(error: SQLAlchemyError) -> bool:
    """Whether ``error`` is a connection-level failure worth retrying."""
    if isinstance(error, (DisconnectionError, PoolTimeout)):
        return True
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    if isinstance(error, OperationalError):
        orig = error.orig
        args = getattr(orig, 'args', ())
        if args and isinstance(args[0], int):
            return args[0] in TRANSIENT_MYSQL_CODES
        message = str(orig).lower()
        return any(fragment in message for fragment in TRANSIENT_MESSAGES)
    return False


def bindable(value: Any) -> Any:
    """Convert a domain value into something every driver can bind."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class ConnectionManager:
    """Pool of connections to one named database, with retrying execution.

    Parameters
    ----------
    server_url : str or :class:`sqlalchemy.engine.URL`
        URL of the database server, without a database name.
    connection_limit : int
        Size of the connection pool.
    connect_timeout : int
        Seconds to wait when opening or checking out a connection.
    idle_timeout : int
        Seconds after which pooled connections are recycled.
    retry_interval : float
        Seconds between attempts of a statement that failed transiently.
    max_retries : int
        Retries after the first attempt, unless overridden per statement.

    """

    def __init__(self, server_url: Union[str, URL],
                 connection_limit: int = 10,
                 connect_timeout: int = 30,
                 idle_timeout: int = 60,
                 retry_interval: float = 5,
                 max_retries: int = 3) -> None:
        self.server_url = make_url(server_url)
        self.connection_limit = connection_limit
        self.connect_timeout = connect_timeout
        self.idle_timeout = idle_timeout
        self.retry_interval = retry_interval
        self.max_retries = max_retries

        self._lock = threading.RLock()
        self._server_engine: Optional[Engine] = None
        self._engine: Optional[Engine] = None
        self._database: Optional[str] = None
        self._initialized = False
        self._closed = False

    @property
    def is_sqlite(self) -> bool:
        return self.server_url.get_backend_name() == 'sqlite'

    @property
    def current_database(self) -> Optional[str]:
        return self._database

    def _create_engine(self, url: URL) -> Engine:
        if url.get_backend_name() == 'sqlite':
            engine = create_engine(url, connect_args={'check_same_thread': False})
            event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
            return engine
        return create_engine(
            url,
            pool_size=self.connection_limit,
            pool_timeout=self.connect_timeout,
            pool_recycle=self.idle_timeout,
            pool_pre_ping=True,
            connect_args={'connect_timeout': self.connect_timeout},
        )

    def _server(self) -> Engine:
        with self._lock:
            if self._server_engine is None:
                self._server_engine = self._create_engine(self.server_url)
            return self._server_engine

    def _require_engine(self) -> Engine:
        engine = self._engine
        if engine is None:
            raise ConfigurationError('No database selected. Call select_database() first.')
        return engine

    def ensure_database(self, name: str) -> None:
        """Create the database ``name`` if it does not exist."""
        if self.is_sqlite:
            logger.debug('SQLite database "%s" is created on first connect', name)
            return
        if not DATABASE_NAME.match(name):
            raise ConfigurationError(f'Invalid database name: {name!r}')
        try:
            with self._server().begin() as conn:
                conn.execute(text(f'CREATE DATABASE IF NOT EXISTS `{name}`'))
        except SQLAlchemyError as e:
            raise ServiceUnavailable(f'Could not create database {name}') from e
        logger.info('Database "%s" ensured', name)

    def select_database(self, name: str) -> None:
        """Point the pool at database ``name``; no-op if it already is."""
        with self._lock:
            if self._engine is not None and self._database == name:
                return
            if self._engine is not None:
                self._engine.dispose()

            self._engine = self._create_engine(self.server_url.set(database=name))
            self._database = name
            self._initialized = False
            self._closed = False
            try:
                with self._engine.connect() as conn:
                    conn.execute(text('SELECT 1'))
            except SQLAlchemyError as e:
                raise ServiceUnavailable(f'Could not connect to database {name}') from e
            logger.info('Connected to database: %s', name)

    def initialize_schema(self) -> None:
        """Create the users, artists and songs tables if absent."""
        with self._lock:
            engine = self._require_engine()
            if self._initialized:
                return
            try:
                metadata.create_all(bind=engine, checkfirst=True)
            except SQLAlchemyError as e:
                raise ServiceUnavailable('Could not initialize tables') from e
            self._initialized = True
            logger.info('Tables initialized successfully')

    def _run(self, engine: Engine, statement: str,
             params: Optional[Dict[str, Any]]) -> QueryResult:
        with engine.begin() as conn:
            result = conn.execute(text(statement), params or {})
            if result.returns_rows:
                return QueryResult([dict(row._mapping) for row in result],
                                   result.rowcount)
            return QueryResult([], result.rowcount, result.lastrowid)

    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None,
                retries: Optional[int] = None) -> QueryResult:
        """Run a parameterized statement in its own transaction.

        Parameters
        ----------
        statement : str
            SQL with ``:name`` placeholders.
        params : dict
            Values for the placeholders.
        retries : int
            Override for :attr:`max_retries`.

        Returns
        -------
        :class:`QueryResult`

        Raises
        ------
        :class:`.Conflict`
            The statement violated a constraint.
        :class:`.ServiceUnavailable`
            Transient failures persisted through every retry.
        :class:`.InternalError`
            Any other database error.

        """
        engine = self._require_engine()
        max_retries = self.max_retries if retries is None else retries
        last_error: Optional[SQLAlchemyError] = None

        for attempt in range(max_retries + 1):
            try:
                return self._run(engine, statement, params)
            except IntegrityError as e:
                logger.info('Constraint violated: %s', e.orig)
                raise Conflict('Constraint violated') from e
            except SQLAlchemyError as e:
                if not is_transient(e):
                    logger.error('Query failed: %s', e)
                    raise InternalError(f'Query failed for SQL: {statement}') from e
                last_error = e
                if attempt < max_retries:
                    logger.warning(
                        'Query attempt %s failed, retrying in %ss',
                        attempt + 1, self.retry_interval, exc_info=True
                    )
                    engine.dispose()
                    time.sleep(self.retry_interval)

        raise ServiceUnavailable(
            f'Query failed after {max_retries} retries for SQL: {statement}'
        ) from last_error

    def ping(self) -> bool:
        """Check that the selected database answers."""
        try:
            self.execute('SELECT 1', retries=0)
        except (ConfigurationError, ServiceUnavailable, InternalError) as e:
            logger.error('Encountered an error talking to database: %s', e)
            return False
        return True

    def close(self) -> None:
        """Release every pooled connection. Safe to call repeatedly."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            if self._server_engine is not None:
                self._server_engine.dispose()
                self._server_engine = None
            self._database = None
            self._initialized = False
            logger.info('Database connections closed')
