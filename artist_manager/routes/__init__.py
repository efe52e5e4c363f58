"""HTTP routes and the helpers they share."""

from typing import Any, NamedTuple, Optional

from fastapi import Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..controllers.accounts import AccountService
from ..controllers.artists import ArtistService
from ..controllers.songs import SongService
from ..domain import Page


def get_accounts(request: Request) -> AccountService:
    """Dependency for the account workflows."""
    return request.app.extra['accounts']


def get_artists(request: Request) -> ArtistService:
    return request.app.extra['artists']


def get_songs(request: Request) -> SongService:
    return request.app.extra['songs']


class Pagination(NamedTuple):
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination(page: int = Query(1, ge=1),
               limit: int = Query(10, ge=1, le=100)) -> Pagination:
    """Dependency reading ``page`` and ``limit`` query parameters."""
    return Pagination(page, limit)


def respond(message: str = '', data: Any = None, status_code: int = 200,
            page: Optional[Page] = None) -> JSONResponse:
    """Wrap ``data`` in the response envelope."""
    content: dict = {'success': status_code < 400, 'message': message}
    if data is not None:
        content['data'] = data
    if page is not None:
        content['pagination'] = {
            'total': page.total,
            'totalPages': page.total_pages,
            'currentPage': page.current_page,
            'perPage': page.limit,
        }
    return JSONResponse(content=jsonable_encoder(content),
                        status_code=status_code)
