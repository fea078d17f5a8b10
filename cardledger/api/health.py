"""
Health check endpoints.

/health is a liveness probe. /ready also requires a reachable database and
a ledger loaded into app state, since every ledger route needs both.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardledger.db.database import get_session
from cardledger.services.ledger import CardLedger

router = APIRouter(tags=["health"])


class LedgerStatus(BaseModel):
    """Size of the loaded ledger."""

    cards: int
    next_card_id: int
    graders: int
    owned_cards: int

    @classmethod
    def from_ledger(cls, ledger: CardLedger) -> "LedgerStatus":
        return cls(
            cards=len(ledger.cards),
            next_card_id=ledger.cards.next_card_id,
            graders=len(ledger.grading.graders()),
            owned_cards=sum(1 for _ in ledger.ownership.owners()),
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    ledger: LedgerStatus | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Checks nothing beyond the process answering."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    request: Request,
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 until the ledger has been loaded, or while the database
    is unreachable.
    """
    ledger: CardLedger | None = getattr(request.app.state, "ledger", None)
    try:
        await session.execute(text("SELECT 1"))
        database = "connected"
    except (SQLAlchemyError, OSError):
        database = "disconnected"

    if ledger is None or database != "connected":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database=database)

    return HealthResponse(
        status="ready", database=database, ledger=LedgerStatus.from_ledger(ledger)
    )
