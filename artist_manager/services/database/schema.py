"""Table definitions for accounts, artists and songs.

Only used to emit DDL. Statements against these tables are plain SQL text,
see :mod:`artist_manager.services.accounts` and friends.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    false,
    func,
)

from ...domain import Gender, Genre, Role

metadata = MetaData()


def _values(enum):
    return [member.value for member in enum]


users = Table(
    "users",
    metadata,
    Column("id", Integer(), primary_key=True, autoincrement=True),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password", String(500), nullable=False),
    Column("phone", String(20)),
    Column("dob", Date()),
    Column("gender", Enum(*_values(Gender), name="gender")),
    Column("address", String(255)),
    Column("role", Enum(*_values(Role), name="role"), nullable=False),
    Column("is_verified", Boolean(), nullable=False, server_default=false()),
    Column("verification_token", String(255), index=True),
    Column("created_at", DateTime(), server_default=func.now()),
    Column("updated_at", DateTime(), server_default=func.now()),
)

artists = Table(
    "artists",
    metadata,
    Column("id", Integer(), primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("dob", Date()),
    Column("gender", Enum(*_values(Gender), name="gender")),
    Column("address", String(255)),
    Column("first_release_year", Integer()),
    Column("no_of_album_released", Integer()),
    Column(
        "user_id",
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("created_at", DateTime(), server_default=func.now()),
    Column("updated_at", DateTime()),
)

songs = Table(
    "songs",
    metadata,
    Column("id", Integer(), primary_key=True, autoincrement=True),
    Column(
        "artist_id",
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("title", String(255), nullable=False),
    Column("album_name", String(255)),
    Column("genre", Enum(*_values(Genre), name="genre")),
    Column("created_at", DateTime(), server_default=func.now()),
    Column("updated_at", DateTime(), server_default=func.now()),
)
