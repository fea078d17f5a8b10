"""
Grading registry API endpoints.

Grader allowlist management (admin only), card grading (verified graders
only), and grading lookup.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardledger.api.cards import AdminResponse, AdminTransferRequest
from cardledger.api.dependencies import Caller, Ledger, unwrap
from cardledger.db import GRADING_REGISTRY, insert_grading, set_grader, set_registry_admin
from cardledger.db.database import get_session
from cardledger.models.failure import ApiResponse, NotFoundError, create_success
from cardledger.models.records import GradingRecord

router = APIRouter(prefix="/grading", tags=["grading"])


class GraderRequest(BaseModel):
    """Request model for adding a grader."""

    grader: str = Field(..., min_length=1)


class GraderResponse(BaseModel):
    """Allowlist membership of one grader."""

    grader: str
    verified: bool


class GraderListResponse(BaseModel):
    """The full grader allowlist."""

    graders: list[str]


class GradeRequest(BaseModel):
    """Request model for grading a card."""

    grade: float = Field(..., description="Condition score; bounds are not enforced")
    notes: str = ""
    height: int = Field(..., description="Current clock height, recorded as the grading date")


class GradingResponse(BaseModel):
    """Response model for a card's grading."""

    card_id: int
    grade: float
    grader: str
    grading_date: int
    notes: str

    @classmethod
    def from_record(cls, card_id: int, record: GradingRecord) -> "GradingResponse":
        return cls(
            card_id=card_id,
            grade=record.grade,
            grader=record.grader,
            grading_date=record.grading_date,
            notes=record.notes,
        )


# --- Allowlist ---


@router.get("/graders", response_model=ApiResponse[GraderListResponse])
async def list_graders(ledger: Ledger) -> ApiResponse[GraderListResponse]:
    """List verified graders."""
    return create_success(GraderListResponse(graders=ledger.grading.graders()))


@router.post("/graders", response_model=ApiResponse[GraderResponse])
async def add_grader(
    request: GraderRequest,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[GraderResponse]:
    """Add a grader to the allowlist. Admin only; repeating is harmless."""
    async with ledger.transaction():
        unwrap(ledger.grading.add_grader(caller, request.grader))
        await set_grader(session, request.grader, verified=True)
        await session.commit()

    return create_success(GraderResponse(grader=request.grader, verified=True))


@router.get("/graders/{grader}", response_model=ApiResponse[GraderResponse])
async def get_grader(grader: str, ledger: Ledger) -> ApiResponse[GraderResponse]:
    """Check whether a principal is a verified grader."""
    return create_success(
        GraderResponse(grader=grader, verified=ledger.grading.is_verified_grader(grader))
    )


@router.delete("/graders/{grader}", response_model=ApiResponse[GraderResponse])
async def remove_grader(
    grader: str,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[GraderResponse]:
    """Remove a grader from the allowlist. Admin only; removing an absent grader is harmless."""
    async with ledger.transaction():
        unwrap(ledger.grading.remove_grader(caller, grader))
        await set_grader(session, grader, verified=False)
        await session.commit()

    return create_success(GraderResponse(grader=grader, verified=False))


# --- Admin ---


@router.get("/admin", response_model=ApiResponse[AdminResponse])
async def get_admin(ledger: Ledger) -> ApiResponse[AdminResponse]:
    """Current grading registry admin."""
    return create_success(AdminResponse(admin=ledger.grading.admin))


@router.post("/admin", response_model=ApiResponse[AdminResponse])
async def transfer_admin(
    request: AdminTransferRequest,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[AdminResponse]:
    """Hand the grading registry admin to a new principal."""
    async with ledger.transaction():
        unwrap(ledger.grading.transfer_admin(caller, request.new_admin))
        await set_registry_admin(session, GRADING_REGISTRY, request.new_admin)
        await session.commit()

    return create_success(AdminResponse(admin=ledger.grading.admin))


# --- Gradings ---


@router.post("/cards/{card_id}", response_model=ApiResponse[GradingResponse])
async def grade_card(
    card_id: int,
    request: GradeRequest,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[GradingResponse]:
    """
    Grade a card.

    The caller must be a verified grader, and a card can be graded only
    once. The card id is not checked against the card registry.
    """
    async with ledger.transaction():
        unwrap(
            ledger.grading.grade_card(
                caller, card_id, request.grade, request.notes, request.height
            )
        )
        record = ledger.grading.get_grading(card_id)
        if record is None:
            msg = f"Grading for card {card_id} not found after grading"
            raise RuntimeError(msg)
        await insert_grading(session, card_id, record)
        await session.commit()

    return create_success(GradingResponse.from_record(card_id, record))


@router.get("/cards/{card_id}", response_model=ApiResponse[GradingResponse])
async def get_grading(card_id: int, ledger: Ledger) -> ApiResponse[GradingResponse]:
    """Get a card's grading."""
    record = ledger.grading.get_grading(card_id)
    if record is None:
        raise NotFoundError(f"grading for card {card_id}")

    return create_success(GradingResponse.from_record(card_id, record))
