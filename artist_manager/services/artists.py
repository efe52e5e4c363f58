"""Storage of artist profiles in the ``artists`` table."""

from typing import Any, Dict, List, Optional

from ..domain import Artist
from .database import ConnectionManager, bindable

COLUMNS = ('name', 'dob', 'gender', 'address', 'first_release_year',
           'no_of_album_released', 'user_id')
UPDATABLE = COLUMNS[:-1]


class ArtistRepository(object):
    """Reads and writes artist rows."""

    def __init__(self, db: ConnectionManager) -> None:
        self.db = db

    def create(self, values: Dict[str, Any]) -> int:
        params = {column: bindable(values.get(column)) for column in COLUMNS}
        result = self.db.execute(
            f"""INSERT INTO artists ({', '.join(COLUMNS)})
            VALUES ({', '.join(':' + column for column in COLUMNS)})""",
            params
        )
        return int(result.lastrowid)

    def find_by_id(self, artist_id: int) -> Optional[Artist]:
        row = self.db.execute('SELECT * FROM artists WHERE id = :id LIMIT 1',
                              {'id': artist_id}).first()
        return Artist.model_validate(row) if row else None

    def find_by_user(self, user_id: int) -> Optional[Artist]:
        row = self.db.execute(
            'SELECT * FROM artists WHERE user_id = :user_id LIMIT 1',
            {'user_id': user_id}
        ).first()
        return Artist.model_validate(row) if row else None

    def find_all(self, limit: int = 10, offset: int = 0) -> List[Artist]:
        result = self.db.execute(
            """SELECT * FROM artists ORDER BY created_at DESC, id DESC
            LIMIT :limit OFFSET :offset""",
            {'limit': limit, 'offset': offset}
        )
        return [Artist.model_validate(row) for row in result.rows]

    def count(self) -> int:
        result = self.db.execute('SELECT COUNT(*) AS count FROM artists')
        return int(result.scalar() or 0)

    def update(self, artist_id: int, values: Dict[str, Any]) -> None:
        unknown = set(values) - set(UPDATABLE)
        if unknown:
            raise ValueError(f'Not updatable: {", ".join(sorted(unknown))}')
        if not values:
            return
        fields = [field for field in UPDATABLE if field in values]
        params = {field: bindable(values[field]) for field in fields}
        params['id'] = artist_id
        self.db.execute(
            f"""UPDATE artists SET
            {', '.join(f'{field} = :{field}' for field in fields)},
            updated_at = CURRENT_TIMESTAMP WHERE id = :id""",
            params
        )

    def delete(self, artist_id: int) -> None:
        self.db.execute('DELETE FROM artists WHERE id = :id', {'id': artist_id})
