"""Song routes.

Any authenticated role may read, add and edit songs. Deleting a song is
reserved to ``super_admin`` and ``artist``.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth.gate import RoleGate, authenticated, everyone
from ..controllers.songs import SongService
from ..domain import Claims, Role, SongData, SongPatch
from . import Pagination, get_songs, pagination, respond

router = APIRouter()

song_removers = RoleGate(Role.SUPER_ADMIN, Role.ARTIST)


@router.get('/')
def list_songs(_claims: Claims = Depends(everyone),
               paging: Pagination = Depends(pagination),
               songs: SongService = Depends(get_songs)) -> JSONResponse:
    page = songs.list(paging.limit, paging.offset)
    return respond('Songs fetched successfully', page.items, page=page)


@router.get('/artist/{artist_id}')
def list_artist_songs(artist_id: int, _claims: Claims = Depends(everyone),
                      paging: Pagination = Depends(pagination),
                      songs: SongService = Depends(get_songs)) -> JSONResponse:
    page = songs.for_artist(artist_id, paging.limit, paging.offset)
    return respond('Songs fetched successfully', page.items, page=page)


@router.get('/{song_id}')
def get_song(song_id: int, _claims: Claims = Depends(authenticated),
             songs: SongService = Depends(get_songs)) -> JSONResponse:
    return respond('Song fetched successfully', songs.get(song_id))


@router.post('/')
def create_song(data: SongData, _claims: Claims = Depends(everyone),
                songs: SongService = Depends(get_songs)) -> JSONResponse:
    song_id = songs.create(data)
    return respond('Song created successfully', {'id': song_id},
                   status_code=201)


@router.patch('/{song_id}')
def update_song(song_id: int, patch: SongPatch,
                _claims: Claims = Depends(everyone),
                songs: SongService = Depends(get_songs)) -> JSONResponse:
    return respond('Song updated successfully', songs.update(song_id, patch))


@router.delete('/{song_id}')
def delete_song(song_id: int, _claims: Claims = Depends(song_removers),
                songs: SongService = Depends(get_songs)) -> JSONResponse:
    songs.delete(song_id)
    return respond('Song deleted successfully')
