"""
Ownership ledger API endpoints.

Ownership registration, transfers, and the append-only transfer history.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardledger.api.dependencies import Caller, Ledger, unwrap
from cardledger.db import insert_owner, record_transfer
from cardledger.db.database import get_session
from cardledger.models.failure import ApiResponse, NotFoundError, create_success
from cardledger.models.records import HistoryEntry

router = APIRouter(prefix="/ownership", tags=["ownership"])


class TransferRequest(BaseModel):
    """Request model for transferring a card."""

    new_owner: str = Field(..., min_length=1)
    height: int = Field(..., description="Current clock height, recorded as the transfer date")


class OwnerResponse(BaseModel):
    """Current owner of a card."""

    card_id: int
    owner: str
    history_count: int


class HistoryEntryResponse(BaseModel):
    """One transfer in a card's history."""

    index: int
    previous_owner: str
    new_owner: str
    transfer_date: int

    @classmethod
    def from_entry(cls, index: int, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            index=index,
            previous_owner=entry.previous_owner,
            new_owner=entry.new_owner,
            transfer_date=entry.transfer_date,
        )


class HistoryResponse(BaseModel):
    """A card's full transfer history, oldest first."""

    card_id: int
    count: int
    entries: list[HistoryEntryResponse] = Field(default_factory=list)


@router.post("/{card_id}", response_model=ApiResponse[OwnerResponse])
async def register_ownership(
    card_id: int,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[OwnerResponse]:
    """
    Register the caller as the first owner of a card.

    Any card id is accepted; the card registry is not consulted.
    """
    async with ledger.transaction():
        unwrap(ledger.ownership.register_ownership(caller, card_id))
        await insert_owner(session, card_id, caller)
        await session.commit()

    return create_success(OwnerResponse(card_id=card_id, owner=caller, history_count=0))


@router.post("/{card_id}/transfer", response_model=ApiResponse[HistoryEntryResponse])
async def transfer_ownership(
    card_id: int,
    request: TransferRequest,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[HistoryEntryResponse]:
    """Transfer a card from the caller to a new owner. Returns the appended history entry."""
    async with ledger.transaction():
        unwrap(
            ledger.ownership.transfer_ownership(
                caller, card_id, request.new_owner, request.height
            )
        )
        index = ledger.ownership.get_history_count(card_id) - 1
        entry = ledger.ownership.get_history_entry(card_id, index)
        if entry is None:
            msg = f"History entry {index} for card {card_id} not found after transfer"
            raise RuntimeError(msg)
        await record_transfer(session, card_id, index, entry)
        await session.commit()

    return create_success(HistoryEntryResponse.from_entry(index, entry))


@router.get("/{card_id}", response_model=ApiResponse[OwnerResponse])
async def get_owner(card_id: int, ledger: Ledger) -> ApiResponse[OwnerResponse]:
    """Get a card's current owner."""
    record = ledger.ownership.get_owner(card_id)
    if record is None:
        raise NotFoundError(f"owner for card {card_id}")

    return create_success(
        OwnerResponse(
            card_id=card_id,
            owner=record.owner,
            history_count=ledger.ownership.get_history_count(card_id),
        )
    )


@router.get("/{card_id}/history", response_model=ApiResponse[HistoryResponse])
async def get_history(card_id: int, ledger: Ledger) -> ApiResponse[HistoryResponse]:
    """
    Get a card's transfer history.

    Unregistered cards have an empty history with count 0.
    """
    entries = [
        HistoryEntryResponse.from_entry(index, entry)
        for index, entry in enumerate(ledger.ownership.get_history(card_id))
    ]
    return create_success(HistoryResponse(card_id=card_id, count=len(entries), entries=entries))


@router.get("/{card_id}/history/{index}", response_model=ApiResponse[HistoryEntryResponse])
async def get_history_entry(
    card_id: int,
    index: Annotated[int, Path(ge=0)],
    ledger: Ledger,
) -> ApiResponse[HistoryEntryResponse]:
    """Get one transfer from a card's history by sequence index."""
    entry = ledger.ownership.get_history_entry(card_id, index)
    if entry is None:
        raise NotFoundError(f"history entry {index} for card {card_id}")

    return create_success(HistoryEntryResponse.from_entry(index, entry))
