"""Storage of accounts in the ``users`` table."""

import logging
from typing import Any, Dict, List, Optional

from ..domain import Account, Role
from .database import ConnectionManager, bindable

logger = logging.getLogger(__name__)

UPDATABLE = ('first_name', 'last_name', 'email', 'phone', 'dob', 'gender',
             'address', 'role')
"""Columns :meth:`AccountRepository.update` will write."""

LISTED = ('id, first_name, last_name, email, phone, dob, gender, address, '
          'role, is_verified, created_at, updated_at')


class AccountRepository(object):
    """Reads and writes account rows."""

    def __init__(self, db: ConnectionManager) -> None:
        self.db = db

    def _one(self, statement: str, params: Dict[str, Any]) -> Optional[Account]:
        row = self.db.execute(statement, params).first()
        if row is None:
            return None
        return Account.model_validate(row)

    def create(self, values: Dict[str, Any], password_hash: str,
               token_hash: Optional[str]) -> int:
        """Insert an unverified account and return its id."""
        params = {
            'first_name': values['first_name'],
            'last_name': values['last_name'],
            'email': values['email'],
            'password': password_hash,
            'phone': values.get('phone'),
            'dob': values.get('dob'),
            'gender': values.get('gender'),
            'address': values.get('address'),
            'role': values['role'],
            'verification_token': token_hash,
        }
        result = self.db.execute(
            """INSERT INTO users
            (first_name, last_name, email, password, phone, dob, gender,
             address, role, is_verified, verification_token)
            VALUES (:first_name, :last_name, :email, :password, :phone, :dob,
                    :gender, :address, :role, 0, :verification_token)""",
            {key: bindable(value) for key, value in params.items()}
        )
        return int(result.lastrowid)

    def find_by_id(self, account_id: int) -> Optional[Account]:
        return self._one('SELECT * FROM users WHERE id = :id LIMIT 1',
                         {'id': account_id})

    def find_by_email(self, email: str) -> Optional[Account]:
        return self._one('SELECT * FROM users WHERE email = :email LIMIT 1',
                         {'email': email})

    def find_by_token_hash(self, token_hash: str) -> Optional[Account]:
        return self._one(
            'SELECT * FROM users WHERE verification_token = :token LIMIT 1',
            {'token': token_hash}
        )

    def set_token_hash(self, account_id: int, token_hash: Optional[str]) -> None:
        """Overwrite the one-time token slot."""
        self.db.execute(
            """UPDATE users SET verification_token = :token,
            updated_at = CURRENT_TIMESTAMP WHERE id = :id""",
            {'token': token_hash, 'id': account_id}
        )

    def mark_verified(self, account_id: int, token_hash: str) -> bool:
        """Verify the account and clear its token slot, if it still holds
        ``token_hash``."""
        result = self.db.execute(
            """UPDATE users SET is_verified = 1, verification_token = NULL,
            updated_at = CURRENT_TIMESTAMP
            WHERE id = :id AND verification_token = :token""",
            {'id': account_id, 'token': token_hash}
        )
        return result.rowcount == 1

    def set_password(self, account_id: int, password_hash: str,
                     token_hash: str) -> bool:
        """Replace the password and clear the token slot in one statement."""
        result = self.db.execute(
            """UPDATE users SET password = :password, verification_token = NULL,
            updated_at = CURRENT_TIMESTAMP
            WHERE id = :id AND verification_token = :token""",
            {'password': password_hash, 'id': account_id, 'token': token_hash}
        )
        return result.rowcount == 1

    def update(self, account_id: int, values: Dict[str, Any]) -> None:
        """Write the given profile columns."""
        unknown = set(values) - set(UPDATABLE)
        if unknown:
            raise ValueError(f'Not updatable: {", ".join(sorted(unknown))}')
        if not values:
            return
        fields = [field for field in UPDATABLE if field in values]
        assignments = ', '.join(f'{field} = :{field}' for field in fields)
        params = {field: bindable(values[field]) for field in fields}
        params['id'] = account_id
        self.db.execute(
            f"""UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP
            WHERE id = :id""",
            params
        )

    def delete(self, account_id: int) -> None:
        self.db.execute('DELETE FROM users WHERE id = :id', {'id': account_id})

    def find_all(self, limit: int = 10, offset: int = 0,
                 role: Optional[Role] = None) -> List[Dict[str, Any]]:
        """List accounts without their secrets, newest first."""
        where, params = self._filter(role)
        params.update({'limit': limit, 'offset': offset})
        result = self.db.execute(
            f"""SELECT {LISTED} FROM users {where}
            ORDER BY id DESC LIMIT :limit OFFSET :offset""",
            params
        )
        return result.rows

    def count(self, role: Optional[Role] = None) -> int:
        where, params = self._filter(role)
        result = self.db.execute(
            f'SELECT COUNT(*) AS total FROM users {where}', params
        )
        return int(result.scalar() or 0)

    def _filter(self, role: Optional[Role]):
        if role is None:
            return '', {}
        return 'WHERE role = :role', {'role': bindable(role)}
