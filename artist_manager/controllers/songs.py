"""Song workflows."""

from typing import Any, Dict, Union

from ..domain import Page, Song, SongData, SongPatch
from ..exceptions import NotFound, ValidationFailed
from ..services.artists import ArtistRepository
from ..services.songs import SongRepository


class SongService(object):
    """CRUD over songs, each belonging to one artist."""

    def __init__(self, songs: SongRepository,
                 artists: ArtistRepository) -> None:
        self.songs = songs
        self.artists = artists

    def _require_artist(self, artist_id: int) -> None:
        if self.artists.find_by_id(artist_id) is None:
            raise NotFound(f'Artist not found with id {artist_id}')

    def create(self, data: SongData) -> int:
        self._require_artist(data.artist_id)
        return self.songs.create(data.model_dump())

    def get(self, song_id: int) -> Song:
        song = self.songs.find_by_id(song_id)
        if song is None:
            raise NotFound(f'Song not found with id {song_id}')
        return song

    def update(self, song_id: int,
               patch: Union[SongPatch, Dict[str, Any]]) -> Song:
        if not isinstance(patch, SongPatch):
            patch = SongPatch.model_validate(patch)
        values = patch.model_dump(exclude_unset=True)
        if 'title' in values and values['title'] is None:
            raise ValidationFailed('title can not be empty')
        song = self.get(song_id)
        self.songs.update(song_id, values)
        return song.model_copy(update=values)

    def delete(self, song_id: int) -> None:
        self.get(song_id)
        self.songs.delete(song_id)

    def list(self, limit: int = 10, offset: int = 0) -> Page:
        return Page(self.songs.find_all(limit, offset), self.songs.count(),
                    limit, offset)

    def for_artist(self, artist_id: int, limit: int = 10,
                   offset: int = 0) -> Page:
        """Songs of one artist, newest first."""
        self._require_artist(artist_id)
        return Page(self.songs.find_by_artist(artist_id, limit, offset),
                    self.songs.count_by_artist(artist_id), limit, offset)
