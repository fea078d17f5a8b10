import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cardledger.api import (
    cards_router,
    grading_router,
    health_router,
    ownership_router,
)
from cardledger.config import settings
from cardledger.db.database import async_session_factory, init_db
from cardledger.db.operations import load_ledger
from cardledger.models.failure import KnownError, create_unknown_failure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables and load the ledger from storage."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    await init_db()
    async with async_session_factory() as session:
        _app.state.ledger = await load_ledger(session, settings)
    logger.info(
        "Ledger loaded: %d cards, next id %d",
        len(_app.state.ledger.cards),
        _app.state.ledger.cards.next_card_id,
    )
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("cardledger"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(grading_router)
app.include_router(health_router)
app.include_router(ownership_router)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render known failures, including ledger rejections, through the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything unanticipated as an unknown failure."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=create_unknown_failure(exc).model_dump(mode="json"),
    )
