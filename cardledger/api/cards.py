"""
Card registry API endpoints.

Registration, lookup and admin handoff for static card attributes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardledger.api.dependencies import Caller, Ledger, unwrap
from cardledger.db import CARD_REGISTRY, insert_card, set_registry_admin
from cardledger.db.database import get_session
from cardledger.models.failure import ApiResponse, NotFoundError, create_success
from cardledger.models.records import CardRecord

router = APIRouter(prefix="/cards", tags=["cards"])


class CardRegistrationRequest(BaseModel):
    """Request model for registering a card."""

    name: str = Field(..., examples=["Rare Dragon"])
    series: str = Field(..., examples=["Fantasy Series 1"])
    manufacturer: str
    rarity: str = Field(..., examples=["Mythic Rare"])
    issue_date: int = Field(..., description="Issue timestamp", examples=[1625097600])


class CardRegisteredResponse(BaseModel):
    """Response model for a registration."""

    card_id: int


class CardResponse(BaseModel):
    """Response model for a registered card."""

    card_id: int
    name: str
    series: str
    manufacturer: str
    rarity: str
    issue_date: int
    registrant: str

    @classmethod
    def from_record(cls, card_id: int, record: CardRecord) -> "CardResponse":
        return cls(
            card_id=card_id,
            name=record.name,
            series=record.series,
            manufacturer=record.manufacturer,
            rarity=record.rarity,
            issue_date=record.issue_date,
            registrant=record.registrant,
        )


class CardListResponse(BaseModel):
    """Response model for all registered cards."""

    cards: list[CardResponse]
    count: int
    next_card_id: int


class AdminTransferRequest(BaseModel):
    """Request model for handing off a registry admin."""

    new_admin: str = Field(..., min_length=1)


class AdminResponse(BaseModel):
    """Response model for a registry's current admin."""

    admin: str


@router.post("", response_model=ApiResponse[CardRegisteredResponse])
async def register_card(
    request: CardRegistrationRequest,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[CardRegisteredResponse]:
    """
    Register a card and issue its id.

    Any caller may register; the caller is recorded as registrant.
    """
    async with ledger.transaction():
        card_id = unwrap(
            ledger.cards.register(
                caller,
                request.name,
                request.series,
                request.manufacturer,
                request.rarity,
                request.issue_date,
            )
        )
        record = ledger.cards.get(card_id)
        if record is None:
            msg = f"Card {card_id} not found after registration"
            raise RuntimeError(msg)
        await insert_card(session, card_id, record)
        await session.commit()

    return create_success(CardRegisteredResponse(card_id=card_id))


@router.get("", response_model=ApiResponse[CardListResponse])
async def list_cards(ledger: Ledger) -> ApiResponse[CardListResponse]:
    """List all registered cards in id order."""
    cards = [CardResponse.from_record(card_id, record) for card_id, record in ledger.cards.cards()]
    return create_success(
        CardListResponse(cards=cards, count=len(cards), next_card_id=ledger.cards.next_card_id)
    )


@router.get("/admin", response_model=ApiResponse[AdminResponse])
async def get_admin(ledger: Ledger) -> ApiResponse[AdminResponse]:
    """Current card registry admin."""
    return create_success(AdminResponse(admin=ledger.cards.admin))


@router.post("/admin", response_model=ApiResponse[AdminResponse])
async def transfer_admin(
    request: AdminTransferRequest,
    caller: Caller,
    ledger: Ledger,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[AdminResponse]:
    """Hand the card registry admin to a new principal."""
    async with ledger.transaction():
        unwrap(ledger.cards.transfer_admin(caller, request.new_admin))
        await set_registry_admin(session, CARD_REGISTRY, request.new_admin)
        await session.commit()

    return create_success(AdminResponse(admin=ledger.cards.admin))


@router.get("/{card_id}", response_model=ApiResponse[CardResponse])
async def get_card(card_id: int, ledger: Ledger) -> ApiResponse[CardResponse]:
    """Get a registered card's attributes."""
    record = ledger.cards.get(card_id)
    if record is None:
        raise NotFoundError(f"card {card_id}")

    return create_success(CardResponse.from_record(card_id, record))
