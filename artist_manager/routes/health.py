from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from . import respond

router = APIRouter()


@router.get('')
def health(request: Request) -> JSONResponse:
    db = request.app.extra['db']
    if db.ping():
        return respond('OK', {'database': db.current_database})
    return respond('Database unavailable', status_code=503)
