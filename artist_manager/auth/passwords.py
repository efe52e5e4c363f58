"""Password hashing."""

import logging

import bcrypt

from ..exceptions import ValidationFailed

logger = logging.getLogger(__name__)

ROUNDS = 10
"""bcrypt cost factor."""

MIN_LENGTH = 8
MAX_BYTES = 72
"""bcrypt ignores (or refuses) anything past 72 bytes."""


def check_strength(password: str) -> None:
    """Reject passwords that do not meet the strength rules."""
    if len(password) < MIN_LENGTH:
        raise ValidationFailed(f'Password must be at least {MIN_LENGTH} characters')
    if not any(char.isdigit() for char in password):
        raise ValidationFailed('Password must contain a number')
    if len(password.encode('utf-8')) > MAX_BYTES:
        raise ValidationFailed(f'Password must be at most {MAX_BYTES} bytes')


def hash_password(password: str) -> str:
    """Generate a salted bcrypt hash of a password."""
    if len(password.encode('utf-8')) > MAX_BYTES:
        raise ValidationFailed(f'Password must be at most {MAX_BYTES} bytes')
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=ROUNDS))
    return hashed.decode('utf-8')


def check_password(password: str, hashed: str) -> bool:
    """Check a password against a stored hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        logger.warning('Stored password hash is not a bcrypt hash')
        return False
