from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from topichub.core.settings import get_settings

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE"]


def add_cors_middleware(app: FastAPI):
    """Allow the configured frontends to call the API.

    The identity header must be listed explicitly so browsers forward it
    on preflighted requests.
    """
    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["Authorization", "Content-Type", settings.user_id_header],
    )
