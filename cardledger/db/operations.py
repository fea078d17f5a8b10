"""
Database write-through and load operations.

The in-memory CardLedger decides every transition. These functions persist
transitions it has already accepted, and rebuild a ledger from storage at
startup.
"""

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardledger.config import Settings
from cardledger.models.db import (
    CardDB,
    CardGradingDB,
    CardOwnerDB,
    OwnershipHistoryDB,
    RegistryAdminDB,
    VerifiedGraderDB,
)
from cardledger.models.records import (
    CardId,
    CardRecord,
    GradingRecord,
    HistoryEntry,
    OwnerRecord,
    Principal,
)
from cardledger.services.card_registry import CardRegistry
from cardledger.services.grading_registry import GradingRegistry
from cardledger.services.ledger import CardLedger
from cardledger.services.ownership_ledger import OwnershipLedger

CARD_REGISTRY = "card_registry"
GRADING_REGISTRY = "grading_registry"

# --- Card Registry ---


async def insert_card(session: AsyncSession, card_id: CardId, record: CardRecord) -> CardDB:
    """
    Persist a newly registered card.

    Raises IntegrityError if the id is already stored.
    """
    card = CardDB(
        id=card_id,
        name=record.name,
        series=record.series,
        manufacturer=record.manufacturer,
        rarity=record.rarity,
        issue_date=record.issue_date,
        registrant=record.registrant,
    )
    session.add(card)
    await session.flush()
    return card


def card_to_record(card: CardDB) -> CardRecord:
    """Convert a database card to a ledger record."""
    return CardRecord(
        name=card.name,
        series=card.series,
        manufacturer=card.manufacturer,
        rarity=card.rarity,
        issue_date=card.issue_date,
        registrant=card.registrant,
    )


async def set_registry_admin(session: AsyncSession, component: str, admin: Principal) -> None:
    """Insert or update the stored admin of a registry component."""
    existing = await session.get(RegistryAdminDB, component)
    if existing:
        existing.admin = admin
    else:
        session.add(RegistryAdminDB(component=component, admin=admin))
    await session.flush()


async def get_registry_admin(session: AsyncSession, component: str) -> Principal | None:
    """Stored admin of a registry, or None if it was never handed off."""
    row = await session.get(RegistryAdminDB, component)
    return row.admin if row else None


# --- Grading Registry ---


async def set_grader(session: AsyncSession, grader: Principal, verified: bool) -> None:
    """Add or remove a grader from the stored allowlist. Idempotent both ways."""
    existing = await session.get(VerifiedGraderDB, grader)
    if verified and existing is None:
        session.add(VerifiedGraderDB(grader=grader))
    elif not verified and existing is not None:
        await session.delete(existing)
    await session.flush()


async def insert_grading(
    session: AsyncSession, card_id: CardId, record: GradingRecord
) -> CardGradingDB:
    """
    Persist a card's grading.

    Raises IntegrityError if the card is already graded.
    """
    grading = CardGradingDB(
        card_id=card_id,
        grade=record.grade,
        grader=record.grader,
        grading_date=record.grading_date,
        notes=record.notes,
    )
    session.add(grading)
    await session.flush()
    return grading


def grading_to_record(grading: CardGradingDB) -> GradingRecord:
    """Convert a database grading to a ledger record."""
    return GradingRecord(
        grade=grading.grade,
        grader=grading.grader,
        grading_date=grading.grading_date,
        notes=grading.notes,
    )


# --- Ownership Ledger ---


async def insert_owner(session: AsyncSession, card_id: CardId, owner: Principal) -> CardOwnerDB:
    """
    Persist a first ownership registration.

    Raises IntegrityError if the card already has an owner row.
    """
    row = CardOwnerDB(card_id=card_id, owner=owner)
    session.add(row)
    await session.flush()
    return row


async def record_transfer(
    session: AsyncSession, card_id: CardId, seq: int, entry: HistoryEntry
) -> OwnershipHistoryDB:
    """
    Persist one accepted transfer.

    Appends the history row and moves the owner row in the same flush, so
    both land in one transaction.
    """
    owner = await session.get(CardOwnerDB, card_id)
    if owner is None:
        msg = f"No stored owner for card {card_id}"
        raise RuntimeError(msg)

    history = OwnershipHistoryDB(
        card_id=card_id,
        seq=seq,
        previous_owner=entry.previous_owner,
        new_owner=entry.new_owner,
        transfer_date=entry.transfer_date,
    )
    session.add(history)
    owner.owner = entry.new_owner
    await session.flush()
    return history


def history_to_entry(row: OwnershipHistoryDB) -> HistoryEntry:
    """Convert a database history row to a ledger entry."""
    return HistoryEntry(
        previous_owner=row.previous_owner,
        new_owner=row.new_owner,
        transfer_date=row.transfer_date,
    )


# --- Loading ---


async def load_ledger(session: AsyncSession, settings: Settings) -> CardLedger:
    """
    Rebuild a CardLedger from storage.

    Stored admins take precedence over the bootstrap admins in settings.
    An empty database yields an empty ledger.
    """
    card_admin = await get_registry_admin(session, CARD_REGISTRY)
    grading_admin = await get_registry_admin(session, GRADING_REGISTRY)

    cards = await session.execute(select(CardDB).order_by(CardDB.id))
    card_registry = CardRegistry.restore(
        card_admin or settings.card_registry_admin,
        ((card.id, card_to_record(card)) for card in cards.scalars()),
    )

    graders = await session.execute(select(VerifiedGraderDB.grader))
    gradings = await session.execute(select(CardGradingDB).order_by(CardGradingDB.card_id))
    grading_registry = GradingRegistry.restore(
        grading_admin or settings.grading_registry_admin,
        graders.scalars(),
        ((g.card_id, grading_to_record(g)) for g in gradings.scalars()),
    )

    owners = await session.execute(select(CardOwnerDB).order_by(CardOwnerDB.card_id))
    rows = await session.execute(
        select(OwnershipHistoryDB).order_by(OwnershipHistoryDB.card_id, OwnershipHistoryDB.seq)
    )
    history: dict[CardId, list[tuple[int, HistoryEntry]]] = defaultdict(list)
    for row in rows.scalars():
        history[row.card_id].append((row.seq, history_to_entry(row)))

    ownership = OwnershipLedger.restore(
        ((o.card_id, OwnerRecord(owner=o.owner)) for o in owners.scalars()),
        history,
    )

    return CardLedger(cards=card_registry, grading=grading_registry, ownership=ownership)
