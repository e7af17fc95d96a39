import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from topichub.core.cors import add_cors_middleware
from topichub.core.exception_handlers import register_exception_handlers
from topichub.core.logging import configure_logging
from topichub.core.request_logging import add_request_logging_middleware
from topichub.core.settings import get_settings
from topichub.db.engine import build_store
from topichub.router import api_router

configure_logging()

logger = logging.getLogger("topichub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    store = build_store(settings.database_url, echo=settings.database_echo)
    store.create_schema()
    app.state.store = store
    logger.info("Store ready (%s)", store.engine.dialect.name)
    yield
    store.dispose()


app = FastAPI(title="TopicHub", version="0.1.0", lifespan=lifespan)

app.include_router(api_router)

add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)
