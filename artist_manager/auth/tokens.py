"""Session tokens and one-time tokens.

Session tokens are HS256 JWTs carrying the account id, email and role. They
are only ever reported as valid or :class:`.InvalidToken`; callers do not
learn whether a token expired or was tampered with.

One-time tokens back email verification and password reset. The raw value is
mailed to the user and only its SHA-256 digest is stored, so reading the
database is not enough to forge a link.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError

from ..domain import Claims, OneTimeToken, Role
from ..exceptions import InvalidToken

ALGORITHM = 'HS256'
SESSION_DURATION = timedelta(hours=5)
ONE_TIME_TOKEN_BYTES = 32


def encode_session(account_id: int, email: str, role: Role, secret: str,
                   now: Optional[datetime] = None,
                   duration: timedelta = SESSION_DURATION) -> str:
    """Sign a session token for an account."""
    issued = now or datetime.now(tz=timezone.utc)
    payload = {
        'id': account_id,
        'email': email,
        'role': Role(role).value,
        'iat': int(issued.timestamp()),
        'exp': int((issued + duration).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_session(token: str, secret: str) -> Claims:
    """Decode and verify a session token."""
    if not token or not isinstance(token, str):
        raise InvalidToken('Not a valid token')
    try:
        data: dict = jwt.decode(token, secret, algorithms=[ALGORITHM],
                                options={'require': ['exp', 'iat']})
    except jwt.PyJWTError as e:
        raise InvalidToken('Not a valid token') from e
    try:
        return Claims.model_validate(data)
    except ValidationError as e:
        raise InvalidToken('Token claims are malformed') from e


def hash_one_time_token(raw: str) -> str:
    return hashlib.sha256(raw.encode('utf-8')).hexdigest()


def issue_one_time_token() -> OneTimeToken:
    """Generate a random token and the digest to persist for it."""
    raw = secrets.token_hex(ONE_TIME_TOKEN_BYTES)
    return OneTimeToken(raw=raw, hashed=hash_one_time_token(raw))
