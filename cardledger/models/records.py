"""
Ledger record types.

All records are frozen: once a card is registered, graded, or a transfer is
appended to history, the stored value never changes. Current ownership is the
only mutable fact, and it is modeled by replacing the OwnerRecord.
"""

from dataclasses import dataclass

# Opaque, already-authenticated caller identity.
Principal = str

CardId = int


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    Static attributes of a registered card.

    Attributes:
        name: Card name as printed
        series: Set or series the card belongs to
        manufacturer: Producer of the card
        rarity: Free-form rarity label (e.g., "Mythic Rare")
        issue_date: Issue timestamp supplied at registration
        registrant: Principal that registered the card
    """

    name: str
    series: str
    manufacturer: str
    rarity: str
    issue_date: int
    registrant: Principal


@dataclass(frozen=True, slots=True)
class GradingRecord:
    """Condition grade issued by a verified grader."""

    grade: float
    grader: Principal
    grading_date: int
    notes: str


@dataclass(frozen=True, slots=True)
class OwnerRecord:
    """Current owner of a card."""

    owner: Principal


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One completed ownership transfer."""

    previous_owner: Principal
    new_owner: Principal
    transfer_date: int
