"""
Role-based authorization of requests.

:class:`RoleGate` is a FastAPI dependency that authenticates the session
cookie and checks the caller's role against the roles a route allows:

.. code-block:: python

   from artist_manager.auth.gate import RoleGate
   from artist_manager.domain import Claims, Role

   managers = RoleGate(Role.SUPER_ADMIN, Role.ARTIST_MANAGER)

   @router.delete('/{account_id}')
   def remove(account_id: int, claims: Claims = Depends(managers)):
       ...

When the dependency runs...

- If there is no session cookie, :class:`.MissingCredential` is raised.
- If the cookie does not decode (bad signature, expired, garbage),
  :class:`.InvalidCredential` is raised.
- If roles were given and the caller's role is not among them,
  :class:`.Forbidden` is raised, naming the roles required.
- Otherwise the claims are attached to ``request.state.claims`` and returned.

"""

import logging
from typing import Iterable, Optional

from fastapi import Request

from ..domain import Claims, Role
from ..exceptions import (
    ConfigurationError,
    Forbidden,
    InvalidCredential,
    InvalidToken,
    MissingCredential,
)
from . import tokens

logger = logging.getLogger(__name__)


def _secret(request: Request) -> str:
    secret = request.app.extra.get('JWT_SECRET')
    if not secret:
        logger.error("The app is misconfigured or no JWT secret has been set")
        raise ConfigurationError('JWT secret is not configured')
    return secret


def _cookie(request: Request) -> Optional[str]:
    return request.cookies.get(request.app.extra.get('COOKIE_NAME', 'accessToken'))


def authenticate(token: Optional[str], secret: str) -> Claims:
    """Turn a raw session token into claims."""
    if not token:
        logger.debug('No session token')
        raise MissingCredential('Access denied, no token provided')
    try:
        return tokens.decode_session(token, secret)
    except InvalidToken as e:
        logger.info('Session token rejected: %s', e)
        raise InvalidCredential('Invalid or expired token') from e


def authorize(claims: Claims, roles: Iterable[Role]) -> Claims:
    """Check that the authenticated role is one of ``roles``.

    An empty ``roles`` admits any authenticated caller.
    """
    allowed = [Role(role) for role in roles]
    if allowed and claims.role not in allowed:
        required = ', '.join(role.value for role in allowed)
        logger.debug('Role %s is not one of %s', claims.role.value, required)
        raise Forbidden(f'Access denied, requires role: {required}')
    return claims


def optional_claims(request: Request) -> Optional[Claims]:
    """Claims for the request, or ``None`` if it is not authenticated."""
    token = _cookie(request)
    if not token:
        return None
    try:
        claims = tokens.decode_session(token, _secret(request))
    except InvalidToken:
        logger.debug('Ignoring invalid session token')
        return None
    request.state.claims = claims
    return claims


class RoleGate:
    """Authenticate the request and admit only the given roles."""

    def __init__(self, *roles: Role) -> None:
        self.roles = tuple(Role(role) for role in roles)

    def __call__(self, request: Request) -> Claims:
        claims = authenticate(_cookie(request), _secret(request))
        authorize(claims, self.roles)
        request.state.claims = claims
        logger.debug('Request is authorized, proceeding')
        return claims

    def __repr__(self) -> str:
        return f"RoleGate({', '.join(role.value for role in self.roles)})"


authenticated = RoleGate()
"""Admits any caller with a valid session."""

managers = RoleGate(Role.SUPER_ADMIN, Role.ARTIST_MANAGER)
everyone = RoleGate(Role.SUPER_ADMIN, Role.ARTIST_MANAGER, Role.ARTIST)
