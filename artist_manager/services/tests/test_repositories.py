"""Tests for the account, artist and song repositories."""

from datetime import date
from unittest import TestCase

from ...domain import Gender, Genre, Role
from ...exceptions import Conflict
from ...tests.util import temporary_db
from ..accounts import AccountRepository
from ..artists import ArtistRepository
from ..songs import SongRepository

PROFILE = {
    'first_name': 'first',
    'last_name': 'last',
    'email': 'first@last.iv',
    'phone': '555-1234',
    'dob': date(1990, 1, 2),
    'gender': Gender.FEMALE,
    'address': 'Kathmandu',
    'role': Role.ARTIST,
}


class TestAccountRepository(TestCase):
    """Tests for :class:`.AccountRepository`."""

    def test_create_and_find(self):
        with temporary_db() as db:
            accounts = AccountRepository(db)
            account_id = accounts.create(PROFILE, 'hashed', 'tokenhash')

            account = accounts.find_by_id(account_id)
            self.assertEqual(account.email, 'first@last.iv')
            self.assertEqual(account.dob, date(1990, 1, 2))
            self.assertEqual(account.gender, Gender.FEMALE)
            self.assertEqual(account.role, Role.ARTIST)
            self.assertFalse(account.is_verified)
            self.assertEqual(account.password, 'hashed')

            self.assertEqual(accounts.find_by_email('first@last.iv').id,
                             account_id)
            self.assertEqual(accounts.find_by_token_hash('tokenhash').id,
                             account_id)
            self.assertIsNone(accounts.find_by_id(account_id + 1))
            self.assertIsNone(accounts.find_by_email('other@last.iv'))

    def test_duplicate_email(self):
        with temporary_db() as db:
            accounts = AccountRepository(db)
            accounts.create(PROFILE, 'hashed', None)
            with self.assertRaises(Conflict):
                accounts.create(PROFILE, 'hashed', None)

    def test_mark_verified_once(self):
        """The token slot can be redeemed only while it holds the hash."""
        with temporary_db() as db:
            accounts = AccountRepository(db)
            account_id = accounts.create(PROFILE, 'hashed', 'tokenhash')
            self.assertFalse(accounts.mark_verified(account_id, 'otherhash'))
            self.assertTrue(accounts.mark_verified(account_id, 'tokenhash'))
            self.assertFalse(accounts.mark_verified(account_id, 'tokenhash'))

            account = accounts.find_by_id(account_id)
            self.assertTrue(account.is_verified)
            self.assertIsNone(account.verification_token)

    def test_set_password(self):
        with temporary_db() as db:
            accounts = AccountRepository(db)
            account_id = accounts.create(PROFILE, 'hashed', None)
            accounts.set_token_hash(account_id, 'resethash')
            self.assertTrue(accounts.set_password(account_id, 'newhash',
                                                  'resethash'))
            self.assertFalse(accounts.set_password(account_id, 'newerhash',
                                                   'resethash'))
            self.assertEqual(accounts.find_by_id(account_id).password, 'newhash')

    def test_update(self):
        with temporary_db() as db:
            accounts = AccountRepository(db)
            account_id = accounts.create(PROFILE, 'hashed', None)
            accounts.update(account_id, {'first_name': 'new',
                                         'role': Role.ARTIST_MANAGER})
            account = accounts.find_by_id(account_id)
            self.assertEqual(account.first_name, 'new')
            self.assertEqual(account.role, Role.ARTIST_MANAGER)

    def test_update_refuses_other_columns(self):
        """Only allow-listed columns ever reach the statement."""
        with temporary_db() as db:
            accounts = AccountRepository(db)
            account_id = accounts.create(PROFILE, 'hashed', None)
            with self.assertRaises(ValueError):
                accounts.update(account_id, {'password': 'x'})
            with self.assertRaises(ValueError):
                accounts.update(account_id, {'id = 1; --': 'x'})

    def test_list_and_count(self):
        """Listings leave out secrets and can be narrowed to a role."""
        with temporary_db() as db:
            accounts = AccountRepository(db)
            for i in range(3):
                accounts.create(dict(PROFILE, email=f'artist{i}@last.iv'),
                                'hashed', None)
            accounts.create(dict(PROFILE, email='boss@last.iv',
                                 role=Role.SUPER_ADMIN), 'hashed', None)

            self.assertEqual(accounts.count(), 4)
            self.assertEqual(accounts.count(Role.ARTIST), 3)

            rows = accounts.find_all(limit=2, offset=0)
            self.assertEqual([row['email'] for row in rows],
                             ['boss@last.iv', 'artist2@last.iv'])
            self.assertNotIn('password', rows[0])
            self.assertNotIn('verification_token', rows[0])

            rows = accounts.find_all(limit=10, offset=0, role=Role.ARTIST)
            self.assertEqual(len(rows), 3)

    def test_delete(self):
        with temporary_db() as db:
            accounts = AccountRepository(db)
            account_id = accounts.create(PROFILE, 'hashed', None)
            accounts.delete(account_id)
            self.assertIsNone(accounts.find_by_id(account_id))


class TestArtistAndSongRepositories(TestCase):
    """Tests for :class:`.ArtistRepository` and :class:`.SongRepository`."""

    def setUp(self):
        self.ctx = temporary_db()
        self.db = self.ctx.__enter__()
        self.accounts = AccountRepository(self.db)
        self.artists = ArtistRepository(self.db)
        self.songs = SongRepository(self.db)
        self.user_id = self.accounts.create(PROFILE, 'hashed', None)

    def tearDown(self):
        self.ctx.__exit__(None, None, None)

    def test_artist_crud(self):
        artist_id = self.artists.create({'name': 'Singer',
                                         'gender': Gender.MALE,
                                         'first_release_year': 2001,
                                         'no_of_album_released': 2,
                                         'user_id': self.user_id})
        artist = self.artists.find_by_id(artist_id)
        self.assertEqual(artist.name, 'Singer')
        self.assertEqual(artist.gender, Gender.MALE)
        self.assertEqual(self.artists.find_by_user(self.user_id).id, artist_id)
        self.assertEqual(self.artists.count(), 1)

        self.artists.update(artist_id, {'name': 'Renamed'})
        self.assertEqual(self.artists.find_by_id(artist_id).name, 'Renamed')
        with self.assertRaises(ValueError):
            self.artists.update(artist_id, {'user_id': 99})

        self.artists.delete(artist_id)
        self.assertIsNone(self.artists.find_by_id(artist_id))

    def test_artist_needs_owner(self):
        with self.assertRaises(Conflict):
            self.artists.create({'name': 'Ghost', 'user_id': 999})

    def test_song_crud(self):
        artist_id = self.artists.create({'name': 'Singer',
                                         'user_id': self.user_id})
        first = self.songs.create({'artist_id': artist_id, 'title': 'One',
                                   'genre': Genre.JAZZ})
        second = self.songs.create({'artist_id': artist_id, 'title': 'Two'})

        self.assertEqual(self.songs.find_by_id(first).genre, Genre.JAZZ)
        self.assertEqual(self.songs.count(), 2)
        self.assertEqual(self.songs.count_by_artist(artist_id), 2)
        self.assertEqual([song.id for song in self.songs.find_by_artist(artist_id)],
                         [second, first])
        self.assertEqual(len(self.songs.find_all(limit=1)), 1)

        self.songs.update(first, {'album_name': 'Album'})
        self.assertEqual(self.songs.find_by_id(first).album_name, 'Album')

        self.songs.delete(first)
        self.assertIsNone(self.songs.find_by_id(first))
        self.assertEqual(self.songs.count_by_artist(artist_id), 1)
