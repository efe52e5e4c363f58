"""
Account lifecycle: registration, verification, login, password reset,
profile changes and removal.

An account moves one way, from unverified to verified. A pending password
reset is not a state of its own; it is the presence of a token hash in the
account's one-time token slot, which verification shares.

Role rules enforced here:

- An ``artist_manager`` may only create, change or remove accounts with the
  ``artist`` role, and may only assign that role.
- Creating an account with no authenticated actor is allowed for every role,
  including ``super_admin``. This is how the first administrator is created.
- Nobody may remove their own account.

"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple, Union

from ..auth import passwords, tokens
from ..domain import (
    Account,
    AccountPatch,
    Artist,
    LoginResult,
    Page,
    Registration,
    Role,
)
from ..exceptions import (
    Conflict,
    EmailNotVerified,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ServiceUnavailable,
    ValidationFailed,
)
from ..services.accounts import AccountRepository
from ..services.artists import ArtistRepository
from ..services.mail import MailDispatcher

logger = logging.getLogger(__name__)

PROFILE_FIELDS = frozenset({'first_name', 'last_name', 'email', 'phone',
                            'dob', 'gender', 'address'})

PATCHABLE = {
    Role.SUPER_ADMIN: PROFILE_FIELDS | {'role'},
    Role.ARTIST_MANAGER: PROFILE_FIELDS | {'role'},
    Role.ARTIST: PROFILE_FIELDS,
}
"""Fields each acting role may change on an account."""

INVALID_TOKEN = 'Invalid or expired token'
INVALID_LOGIN = 'Invalid email or password'


@lru_cache(maxsize=1)
def _decoy_hash() -> str:
    # Checked against when the email is unknown, so both failures cost a hash.
    return passwords.hash_password(tokens.issue_one_time_token().raw[:32])


class AccountService(object):
    """Runs the account workflows against the account and artist stores."""

    def __init__(self, accounts: AccountRepository, artists: ArtistRepository,
                 mail: MailDispatcher, secret: str,
                 frontend_url: str = 'http://localhost:3000',
                 session_duration: timedelta = tokens.SESSION_DURATION) -> None:
        self.accounts = accounts
        self.artists = artists
        self.mail = mail
        self.secret = secret
        self.frontend_url = frontend_url.rstrip('/')
        self.session_duration = session_duration

    def _link(self, path: str, raw_token: str) -> str:
        return f'{self.frontend_url}/{path}?token={raw_token}'

    def _redeem(self, raw_token: Any) -> Tuple[Account, str]:
        """Find the account holding this one-time token."""
        if not raw_token or not isinstance(raw_token, str):
            raise NotFound(INVALID_TOKEN)
        hashed = tokens.hash_one_time_token(raw_token)
        account = self.accounts.find_by_token_hash(hashed)
        if account is None:
            raise NotFound(INVALID_TOKEN)
        return account, hashed

    def register(self, registration: Registration,
                 actor_role: Optional[Role] = None) -> int:
        """Create an unverified account and mail its verification link.

        Parameters
        ----------
        registration : :class:`.Registration`
        actor_role : :class:`.Role`
            Role of the authenticated caller, or ``None`` for an
            unauthenticated registration.

        Returns
        -------
        int
            The new account id.

        Raises
        ------
        :class:`.Conflict`
            The email address is taken.
        :class:`.Forbidden`
            An artist manager tried to create a non-artist account.
        :class:`.ServiceUnavailable`
            The verification email could not be sent. The account is removed
            again before this is raised.

        """
        email = registration.email.lower()
        if self.accounts.find_by_email(email) is not None:
            raise Conflict('User already exist with this email.')

        if actor_role == Role.ARTIST_MANAGER and registration.role != Role.ARTIST:
            raise Forbidden('Artist managers can only create accounts with role "artist".')

        passwords.check_strength(registration.password)
        password_hash = passwords.hash_password(registration.password)
        token = tokens.issue_one_time_token()

        values = registration.model_dump(exclude={'password'})
        values['email'] = email
        account_id = self.accounts.create(values, password_hash, token.hashed)
        logger.info('Created account %s with role %s', account_id,
                    registration.role.value)

        result = self.mail.send_verification_email(
            email, self._link('verify-email', token.raw)
        )
        if not result.success:
            logger.error('Verification mail for account %s failed (%s); '
                         'rolling back', account_id, result.message)
            self.accounts.delete(account_id)
            raise ServiceUnavailable('Server error, Please try again shortly.')
        return account_id

    def verify_email(self, raw_token: str) -> None:
        """Mark the account holding ``raw_token`` as verified."""
        account, hashed = self._redeem(raw_token)
        if not self.accounts.mark_verified(account.id, hashed):
            # Redeemed or replaced between the lookup and the update.
            raise NotFound(INVALID_TOKEN)
        logger.info('Account %s verified', account.id)

    def authenticate(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a session token.

        Unknown email and wrong password raise the same error.
        """
        account = self.accounts.find_by_email((email or '').lower())
        if account is None:
            passwords.check_password(password, _decoy_hash())
            raise InvalidCredentials(INVALID_LOGIN)
        if not passwords.check_password(password, account.password):
            raise InvalidCredentials(INVALID_LOGIN)
        if not account.is_verified:
            raise EmailNotVerified('Please verify your email before logging in')

        token = tokens.encode_session(account.id, account.email, account.role,
                                      self.secret,
                                      duration=self.session_duration)
        artist: Optional[Artist] = None
        if account.role == Role.ARTIST:
            artist = self.artists.find_by_user(account.id)
        return LoginResult(token, account, artist)

    def initiate_password_reset(self, email: str) -> None:
        """Overwrite the token slot and mail a reset link."""
        account = self.accounts.find_by_email((email or '').lower())
        if account is None:
            raise NotFound('User not found')

        token = tokens.issue_one_time_token()
        self.accounts.set_token_hash(account.id, token.hashed)
        result = self.mail.send_password_reset_email(
            account.email, self._link('reset-password', token.raw)
        )
        if not result.success:
            logger.error('Reset mail for account %s failed: %s', account.id,
                         result.message)
            raise ServiceUnavailable('Failed to send reset email, Please try again shortly.')

    def reset_password(self, raw_token: str, new_password: str) -> None:
        """Set a new password using a reset token."""
        account, hashed = self._redeem(raw_token)
        passwords.check_strength(new_password or '')
        if not self.accounts.set_password(account.id,
                                          passwords.hash_password(new_password),
                                          hashed):
            raise NotFound(INVALID_TOKEN)
        logger.info('Password reset for account %s', account.id)

    def get_profile(self, account_id: int) -> Tuple[Account, Optional[Artist]]:
        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFound(f'User not found with id {account_id}')
        artist = None
        if account.role == Role.ARTIST:
            artist = self.artists.find_by_user(account.id)
        return account, artist

    def update_profile(self, actor_role: Role, account_id: int,
                       patch: Union[AccountPatch, Dict[str, Any]]) -> Dict[str, Any]:
        """Apply ``patch`` to an account and return the merged view."""
        if not isinstance(patch, AccountPatch):
            patch = AccountPatch.model_validate(patch)
        values = patch.model_dump(exclude_unset=True)

        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFound(f'User not found with id {account_id}')
        if actor_role == Role.ARTIST_MANAGER and account.role != Role.ARTIST:
            raise Forbidden('Artist managers can only change accounts with role "artist".')

        allowed = PATCHABLE[Role(actor_role)]
        refused = set(values) - allowed
        if 'role' in refused:
            raise Forbidden('Your role can not assign roles.')
        if refused:
            raise ValidationFailed(f'Fields can not be changed: {", ".join(sorted(refused))}')

        role = values.get('role')
        if actor_role == Role.ARTIST_MANAGER and role is not None \
                and role != Role.ARTIST:
            raise Forbidden('Artist managers can only assign role "artist".')

        for required in ('first_name', 'last_name', 'email', 'role'):
            if required in values and values[required] is None:
                raise ValidationFailed(f'{required} can not be empty')

        if values.get('email'):
            values['email'] = values['email'].lower()
            existing = self.accounts.find_by_email(values['email'])
            if existing is not None and existing.id != account_id:
                raise Conflict('Email already in use')

        self.accounts.update(account_id, values)
        return account.model_copy(update=values).public()

    def remove_account(self, actor_role: Role, actor_id: int,
                       account_id: int) -> None:
        """Delete an account, and with it any artist profile and songs."""
        if actor_id == account_id:
            raise Conflict('You cannot remove self identity.')

        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFound(f'User not found with id {account_id}')
        if actor_role == Role.ARTIST_MANAGER and account.role != Role.ARTIST:
            raise Forbidden('Artist managers can only remove accounts with role "artist".')

        self.accounts.delete(account_id)
        logger.info('Account %s removed', account_id)

    def list_accounts(self, actor_role: Role, limit: int = 10,
                      offset: int = 0) -> Page:
        """Accounts visible to the actor; managers only see artists."""
        role = Role.ARTIST if actor_role == Role.ARTIST_MANAGER else None
        return Page(self.accounts.find_all(limit, offset, role),
                    self.accounts.count(role), limit, offset)
