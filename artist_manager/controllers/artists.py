"""Artist profile workflows."""

import logging
from typing import Any, Dict, Optional, Union

from ..domain import Artist, ArtistData, ArtistPatch, Page, Role
from ..exceptions import Conflict, NotFound, ValidationFailed
from ..services.accounts import AccountRepository
from ..services.artists import ArtistRepository

logger = logging.getLogger(__name__)


class ArtistService(object):
    """CRUD over artist profiles, each owned by one ``artist`` account."""

    def __init__(self, artists: ArtistRepository,
                 accounts: AccountRepository) -> None:
        self.artists = artists
        self.accounts = accounts

    def create(self, data: ArtistData) -> int:
        owner = self.accounts.find_by_id(data.user_id)
        if owner is None:
            raise NotFound(f'User not found with id {data.user_id}')
        if owner.role != Role.ARTIST:
            raise Conflict(f'User {data.user_id} does not have role "artist"')
        if self.artists.find_by_user(data.user_id) is not None:
            raise Conflict(f'User {data.user_id} already has an artist profile')

        artist_id = self.artists.create(data.model_dump())
        logger.info('Created artist %s for account %s', artist_id, data.user_id)
        return artist_id

    def get(self, artist_id: int) -> Artist:
        artist = self.artists.find_by_id(artist_id)
        if artist is None:
            raise NotFound(f'Artist not found with id {artist_id}')
        return artist

    def for_account(self, user_id: int) -> Optional[Artist]:
        return self.artists.find_by_user(user_id)

    def list(self, limit: int = 10, offset: int = 0) -> Page:
        return Page(self.artists.find_all(limit, offset), self.artists.count(),
                    limit, offset)

    def update(self, artist_id: int,
               patch: Union[ArtistPatch, Dict[str, Any]]) -> Artist:
        if not isinstance(patch, ArtistPatch):
            patch = ArtistPatch.model_validate(patch)
        values = patch.model_dump(exclude_unset=True)
        if 'name' in values and values['name'] is None:
            raise ValidationFailed('name can not be empty')
        artist = self.get(artist_id)
        self.artists.update(artist_id, values)
        return artist.model_copy(update=values)

    def delete(self, artist_id: int) -> None:
        self.get(artist_id)
        self.artists.delete(artist_id)
        logger.info('Artist %s removed', artist_id)
