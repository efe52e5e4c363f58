"""Asynchronous Server Gateway Interface entry-point.

Run with ``uvicorn artist_manager.asgi:app``.
"""

from .factory import create_app

app = create_app()
