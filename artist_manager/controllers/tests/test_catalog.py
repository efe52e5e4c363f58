"""Tests for the artist and song workflows."""

from datetime import date

import pytest

from ...domain import ArtistData, Genre, Role, SongData
from ...exceptions import Conflict, NotFound, ValidationFailed
from ...tests.util import verified_account


@pytest.fixture
def artist_account(account_service):
    return verified_account(account_service, 'artist@last.iv')


@pytest.fixture
def artist_id(artist_service, artist_account):
    return artist_service.create(ArtistData(name='Singer', user_id=artist_account,
                                            dob=date(1980, 5, 6)))


def test_create_artist(artist_service, artist_id, artist_account):
    artist = artist_service.get(artist_id)
    assert artist.name == 'Singer'
    assert artist.dob == date(1980, 5, 6)
    assert artist.no_of_album_released == 0
    assert artist_service.for_account(artist_account).id == artist_id


def test_artist_needs_artist_account(account_service, artist_service):
    manager = verified_account(account_service, 'manager@last.iv',
                               Role.ARTIST_MANAGER)
    with pytest.raises(Conflict):
        artist_service.create(ArtistData(name='Singer', user_id=manager))
    with pytest.raises(NotFound):
        artist_service.create(ArtistData(name='Singer', user_id=404))


def test_one_profile_per_account(artist_service, artist_id, artist_account):
    with pytest.raises(Conflict):
        artist_service.create(ArtistData(name='Again', user_id=artist_account))


def test_update_artist(artist_service, artist_id):
    updated = artist_service.update(artist_id, {'name': 'Renamed',
                                                'first_release_year': 2001})
    assert updated.name == 'Renamed'
    assert artist_service.get(artist_id).first_release_year == 2001
    with pytest.raises(NotFound):
        artist_service.update(404, {'name': 'x'})


def test_delete_artist(artist_service, song_service, artist_id):
    song_id = song_service.create(SongData(artist_id=artist_id, title='One'))
    artist_service.delete(artist_id)
    with pytest.raises(NotFound):
        artist_service.get(artist_id)
    with pytest.raises(NotFound):
        song_service.get(song_id)
    with pytest.raises(NotFound):
        artist_service.delete(artist_id)


def test_list_artists(artist_service, artist_id):
    page = artist_service.list(limit=10, offset=0)
    assert page.total == 1
    assert page.current_page == 1
    assert [artist.id for artist in page.items] == [artist_id]


def test_songs(song_service, artist_id):
    first = song_service.create(SongData(artist_id=artist_id, title='One',
                                         genre=Genre.ROCK))
    second = song_service.create(SongData(artist_id=artist_id, title='Two'))

    assert song_service.get(first).genre == Genre.ROCK

    updated = song_service.update(second, {'album_name': 'Album'})
    assert updated.album_name == 'Album'
    assert updated.title == 'Two'

    page = song_service.for_artist(artist_id, limit=1, offset=1)
    assert page.total == 2
    assert page.total_pages == 2
    assert page.current_page == 2
    assert [song.id for song in page.items] == [first]

    assert song_service.list().total == 2

    song_service.delete(first)
    with pytest.raises(NotFound):
        song_service.get(first)


def test_song_needs_artist(song_service):
    with pytest.raises(NotFound):
        song_service.create(SongData(artist_id=404, title='One'))
    with pytest.raises(NotFound):
        song_service.for_artist(404)


def test_artist_name_can_not_be_cleared(artist_service, artist_id):
    """An explicit null for the name is a validation failure."""
    with pytest.raises(ValidationFailed):
        artist_service.update(artist_id, {'name': None})
    assert artist_service.get(artist_id).name == 'Singer'
    updated = artist_service.update(artist_id, {'address': None})
    assert updated.address is None


def test_song_title_can_not_be_cleared(song_service, artist_id):
    song_id = song_service.create(SongData(artist_id=artist_id, title='One'))
    with pytest.raises(ValidationFailed):
        song_service.update(song_id, {'title': None})
    assert song_service.get(song_id).title == 'One'
    updated = song_service.update(song_id, {'album_name': None})
    assert updated.album_name is None
