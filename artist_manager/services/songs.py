"""Storage of songs in the ``songs`` table."""

from typing import Any, Dict, List, Optional

from ..domain import Song
from .database import ConnectionManager, bindable

UPDATABLE = ('title', 'album_name', 'genre')


class SongRepository(object):
    """Reads and writes song rows."""

    def __init__(self, db: ConnectionManager) -> None:
        self.db = db

    def create(self, values: Dict[str, Any]) -> int:
        result = self.db.execute(
            """INSERT INTO songs (artist_id, title, album_name, genre)
            VALUES (:artist_id, :title, :album_name, :genre)""",
            {
                'artist_id': values['artist_id'],
                'title': values['title'],
                'album_name': values.get('album_name'),
                'genre': bindable(values.get('genre')),
            }
        )
        return int(result.lastrowid)

    def find_by_id(self, song_id: int) -> Optional[Song]:
        row = self.db.execute('SELECT * FROM songs WHERE id = :id LIMIT 1',
                              {'id': song_id}).first()
        return Song.model_validate(row) if row else None

    def find_all(self, limit: int = 10, offset: int = 0) -> List[Song]:
        result = self.db.execute(
            """SELECT * FROM songs ORDER BY created_at DESC, id DESC
            LIMIT :limit OFFSET :offset""",
            {'limit': limit, 'offset': offset}
        )
        return [Song.model_validate(row) for row in result.rows]

    def find_by_artist(self, artist_id: int, limit: int = 10,
                       offset: int = 0) -> List[Song]:
        result = self.db.execute(
            """SELECT * FROM songs WHERE artist_id = :artist_id
            ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset""",
            {'artist_id': artist_id, 'limit': limit, 'offset': offset}
        )
        return [Song.model_validate(row) for row in result.rows]

    def count(self) -> int:
        result = self.db.execute('SELECT COUNT(*) AS count FROM songs')
        return int(result.scalar() or 0)

    def count_by_artist(self, artist_id: int) -> int:
        result = self.db.execute(
            'SELECT COUNT(*) AS count FROM songs WHERE artist_id = :artist_id',
            {'artist_id': artist_id}
        )
        return int(result.scalar() or 0)

    def update(self, song_id: int, values: Dict[str, Any]) -> None:
        unknown = set(values) - set(UPDATABLE)
        if unknown:
            raise ValueError(f'Not updatable: {", ".join(sorted(unknown))}')
        if not values:
            return
        fields = [field for field in UPDATABLE if field in values]
        params = {field: bindable(values[field]) for field in fields}
        params['id'] = song_id
        self.db.execute(
            f"""UPDATE songs SET
            {', '.join(f'{field} = :{field}' for field in fields)},
            updated_at = CURRENT_TIMESTAMP WHERE id = :id""",
            params
        )

    def delete(self, song_id: int) -> None:
        self.db.execute('DELETE FROM songs WHERE id = :id', {'id': song_id})
