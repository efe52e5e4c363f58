"""Artist profile routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth.gate import everyone, managers
from ..controllers.artists import ArtistService
from ..domain import ArtistData, ArtistPatch, Claims
from . import Pagination, get_artists, pagination, respond

router = APIRouter()


@router.get('/')
def list_artists(_claims: Claims = Depends(everyone),
                 paging: Pagination = Depends(pagination),
                 artists: ArtistService = Depends(get_artists)) -> JSONResponse:
    page = artists.list(paging.limit, paging.offset)
    return respond('Artists fetched successfully', page.items, page=page)


@router.get('/{artist_id}')
def get_artist(artist_id: int, _claims: Claims = Depends(everyone),
               artists: ArtistService = Depends(get_artists)) -> JSONResponse:
    return respond('Artist fetched successfully', artists.get(artist_id))


@router.post('/')
def create_artist(data: ArtistData, _claims: Claims = Depends(managers),
                  artists: ArtistService = Depends(get_artists)) -> JSONResponse:
    artist_id = artists.create(data)
    return respond('Artist created successfully', {'id': artist_id},
                   status_code=201)


@router.patch('/{artist_id}')
def update_artist(artist_id: int, patch: ArtistPatch,
                  _claims: Claims = Depends(managers),
                  artists: ArtistService = Depends(get_artists)) -> JSONResponse:
    return respond('Artist updated successfully',
                   artists.update(artist_id, patch))


@router.delete('/{artist_id}')
def delete_artist(artist_id: int, _claims: Claims = Depends(managers),
                  artists: ArtistService = Depends(get_artists)) -> JSONResponse:
    artists.delete(artist_id)
    return respond('Artist deleted successfully')
