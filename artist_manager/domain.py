"""Domain types for accounts, artists and songs."""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Role(str, Enum):
    """Platform roles, from most to least privileged."""

    SUPER_ADMIN = 'super_admin'
    ARTIST_MANAGER = 'artist_manager'
    ARTIST = 'artist'


class Gender(str, Enum):
    MALE = 'm'
    FEMALE = 'f'
    OTHER = 'o'


class Genre(str, Enum):
    RNB = 'rnb'
    COUNTRY = 'country'
    ROCK = 'rock'
    JAZZ = 'jazz'
    CLASSIC = 'classic'


PRIVATE_ACCOUNT_FIELDS = {'password', 'verification_token'}


class Account(BaseModel):
    """A person with platform access, as stored."""

    id: int
    first_name: str
    last_name: str
    email: str
    password: str
    """bcrypt hash, never the plaintext."""

    phone: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    role: Role
    is_verified: bool = False
    verification_token: Optional[str] = None
    """SHA-256 of the outstanding one-time token, if any."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public(self) -> Dict[str, Any]:
        """Account data safe to hand to a client."""
        return self.model_dump(mode='json', exclude=PRIVATE_ACCOUNT_FIELDS)


class Artist(BaseModel):
    """A performer profile owned by an ``artist`` account."""

    id: int
    name: str
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    first_release_year: Optional[int] = None
    no_of_album_released: Optional[int] = None
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Song(BaseModel):
    """A track belonging to one artist."""

    id: int
    artist_id: int
    title: str
    album_name: Optional[str] = None
    genre: Optional[Genre] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Claims(BaseModel):
    """Contents of a session token."""

    id: int
    email: str
    role: Role
    iat: int
    exp: int


class Registration(BaseModel):
    """Profile submitted to create an account."""

    model_config = ConfigDict(extra='forbid')

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)
    phone: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    role: Role


class AccountPatch(BaseModel):
    """Fields an actor may ask to change on an account.

    Which of these a given actor may actually set is decided by
    :class:`artist_manager.controllers.accounts.AccountService`.
    """

    model_config = ConfigDict(extra='forbid')

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    role: Optional[Role] = None


class ArtistData(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=1)
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    first_release_year: Optional[int] = Field(default=None, ge=1000, le=9999)
    no_of_album_released: int = Field(default=0, ge=0)
    user_id: int


class ArtistPatch(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: Optional[str] = Field(default=None, min_length=1)
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    first_release_year: Optional[int] = Field(default=None, ge=1000, le=9999)
    no_of_album_released: Optional[int] = Field(default=None, ge=0)


class SongData(BaseModel):
    model_config = ConfigDict(extra='forbid')

    artist_id: int
    title: str = Field(min_length=1)
    album_name: Optional[str] = None
    genre: Optional[Genre] = None


class SongPatch(BaseModel):
    model_config = ConfigDict(extra='forbid')

    title: Optional[str] = Field(default=None, min_length=1)
    album_name: Optional[str] = None
    genre: Optional[Genre] = None


class OneTimeToken(NamedTuple):
    """A one-time token: ``raw`` goes to the user, ``hashed`` is stored."""

    raw: str
    hashed: str


class MailResult(NamedTuple):
    success: bool
    message: str = ''


class LoginResult(NamedTuple):
    token: str
    account: Account
    artist: Optional[Artist] = None


class Page(NamedTuple):
    """One page of a listing, with the total size of the listing."""

    items: List[Any]
    total: int
    limit: int
    offset: int = 0

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)
