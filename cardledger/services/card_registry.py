"""
Card registry.

Issues sequential card ids starting at 1 and stores each card's static
attributes exactly once. Registration is open to any caller; only the
admin handoff is gated.

INVARIANT: the nth successful registration receives id n.
INVARIANT: a stored CardRecord is never replaced, and is removed only when
an open undo log rolls back its registration.
"""

import logging
from collections.abc import Iterable, Iterator

from cardledger.models.errors import CardRegistryError
from cardledger.models.records import CardId, CardRecord, Principal
from cardledger.models.result import Err, Ok, Result
from cardledger.services.admin import AdminAuthority
from cardledger.services.undo import UndoLog

logger = logging.getLogger(__name__)

FIRST_CARD_ID = 1


class CardRegistry:
    """Card id allocator and static attribute store."""

    def __init__(self, admin: Principal) -> None:
        self._authority = AdminAuthority(admin)
        self._cards: dict[CardId, CardRecord] = {}
        self._next_card_id: CardId = FIRST_CARD_ID
        self.undo_log = UndoLog()

    @classmethod
    def restore(
        cls, admin: Principal, cards: Iterable[tuple[CardId, CardRecord]]
    ) -> "CardRegistry":
        """Rebuild a registry from stored records, resuming the allocator after the max id."""
        registry = cls(admin)
        for card_id, record in cards:
            registry._cards[card_id] = record
        if registry._cards:
            registry._next_card_id = max(registry._cards) + 1
        return registry

    @property
    def admin(self) -> Principal:
        return self._authority.admin

    @property
    def next_card_id(self) -> CardId:
        """Id the next registration will receive."""
        return self._next_card_id

    def register(
        self,
        caller: Principal,
        name: str,
        series: str,
        manufacturer: str,
        rarity: str,
        issue_date: int,
    ) -> Result[CardId, CardRegistryError]:
        """
        Register a card and return its newly issued id.

        Identical attributes are never deduplicated; each call issues a new id.
        Fails with CARD_EXISTS if the allocated id is already stored, which
        only happens when the allocator and store disagree.
        """
        card_id = self._next_card_id
        if card_id in self._cards:
            logger.warning(
                "Card id %d already stored; allocator out of sync (code %d)",
                card_id,
                CardRegistryError.CARD_EXISTS.code,
            )
            return Err(CardRegistryError.CARD_EXISTS)

        self._cards[card_id] = CardRecord(
            name=name,
            series=series,
            manufacturer=manufacturer,
            rarity=rarity,
            issue_date=issue_date,
            registrant=caller,
        )
        self._next_card_id = card_id + 1
        self.undo_log.record(lambda: self._unregister(card_id))

        logger.info("Registered card %d (%s, %s) by %s", card_id, name, series, caller)
        return Ok(card_id)

    def exists(self, card_id: CardId) -> bool:
        return card_id in self._cards

    def get(self, card_id: CardId) -> CardRecord | None:
        """Get a card's attributes. Returns None for unknown ids."""
        return self._cards.get(card_id)

    def cards(self) -> Iterator[tuple[CardId, CardRecord]]:
        """Iterate over (id, record) pairs in id order."""
        for card_id in sorted(self._cards):
            yield card_id, self._cards[card_id]

    def __len__(self) -> int:
        return len(self._cards)

    def transfer_admin(
        self, caller: Principal, new_admin: Principal
    ) -> Result[None, CardRegistryError]:
        """Hand the registry admin to new_admin. Only the current admin may call this."""
        previous = self._authority.admin
        if not self._authority.transfer(caller, new_admin):
            logger.warning(
                "Rejected card registry admin handoff by %s (code %d)",
                caller,
                CardRegistryError.NOT_AUTHORIZED.code,
            )
            return Err(CardRegistryError.NOT_AUTHORIZED)

        self.undo_log.record(lambda: self._authority.transfer(new_admin, previous))
        logger.info("Card registry admin handed from %s to %s", caller, new_admin)
        return Ok(None)

    def _unregister(self, card_id: CardId) -> None:
        # Only the most recent registration can be undone; ids stay sequential.
        del self._cards[card_id]
        self._next_card_id = card_id
        logger.info("Registration of card %d rolled back", card_id)
