"""Testing helpers."""

import os
import tempfile
from contextlib import contextmanager
from typing import Optional
from unittest import mock

from ..controllers.accounts import AccountService
from ..domain import MailResult, Registration, Role
from ..services.database import ConnectionManager
from ..services.mail import MailDispatcher

SECRET = 'foosecret'


@contextmanager
def temporary_db(max_retries: int = 3):
    """Provide a schema-initialized sqlite database in a temporary file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db = ConnectionManager('sqlite://', retry_interval=0,
                               max_retries=max_retries)
        db.select_database(os.path.join(tmpdir, 'test.db'))
        db.initialize_schema()
        try:
            yield db
        finally:
            db.close()


def fake_mail(success: bool = True) -> mock.MagicMock:
    """A mail dispatcher that records what it was asked to send."""
    mail = mock.MagicMock(spec=MailDispatcher)
    result = MailResult(True, 'Email sent successfully') if success \
        else MailResult(False, 'Connection refused')
    mail.send_verification_email.return_value = result
    mail.send_password_reset_email.return_value = result
    mail.send.return_value = result
    mail.verify.return_value = success
    return mail


def last_token(method: mock.MagicMock) -> str:
    """The raw one-time token from the link most recently passed to a mail
    method."""
    _to, url = method.call_args[0]
    return url.split('token=', 1)[1]


def registration(email: str = 'first@last.iv', role: Role = Role.ARTIST,
                 password: str = 'thepassword1', **extra) -> Registration:
    return Registration(first_name='first', last_name='last', email=email,
                        password=password, role=role, **extra)


def verified_account(service: AccountService, email: str = 'first@last.iv',
                     role: Role = Role.ARTIST, password: str = 'thepassword1',
                     actor_role: Optional[Role] = None) -> int:
    """Register an account and redeem its verification link."""
    account_id = service.register(registration(email, role, password),
                                  actor_role)
    service.verify_email(last_token(service.mail.send_verification_email))
    return account_id
