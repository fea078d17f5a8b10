"""
Ownership ledger.

Tracks the current owner of each card id and an append-only history of
transfers. A card enters the ledger only through an explicit ownership
registration; an id with no owner record is indistinguishable from one
that was never seen.

State per card id:
    Unregistered -> Registered(owner, count=0) -> Registered(owner', count=k)

INVARIANT: the history counter equals the number of appended entries and is
the index of the next entry.
INVARIANT: a transfer appends its entry, moves the owner and bumps the
counter together, or does none of these.
Rolling back an open undo log undoes all three together.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping

from cardledger.models.errors import OwnershipLedgerError
from cardledger.models.records import CardId, HistoryEntry, OwnerRecord, Principal
from cardledger.models.result import Err, Ok, Result
from cardledger.services.undo import UndoLog

logger = logging.getLogger(__name__)


class OwnershipLedger:
    """Current owners plus per-card append-only transfer history."""

    def __init__(self) -> None:
        self._owners: dict[CardId, OwnerRecord] = {}
        # The length of each list is the card's history counter.
        self._history: dict[CardId, list[HistoryEntry]] = {}
        self.undo_log = UndoLog()

    @classmethod
    def restore(
        cls,
        owners: Iterable[tuple[CardId, OwnerRecord]],
        history: Mapping[CardId, Iterable[tuple[int, HistoryEntry]]],
    ) -> "OwnershipLedger":
        """
        Rebuild a ledger from stored owners and histories.

        Each card's history is given as (sequence index, entry) pairs in
        sequence order. Raises ValueError if a history belongs to a card
        with no owner, or if its indexes do not run 0, 1, 2, ... without gaps.
        """
        ledger = cls()
        for card_id, record in owners:
            ledger._owners[card_id] = record
            ledger._history[card_id] = []
        for card_id, entries in history.items():
            if card_id not in ledger._owners:
                raise ValueError(f"History for card {card_id} has no ownership record")
            restored = ledger._history[card_id]
            for seq, entry in entries:
                if seq != len(restored):
                    raise ValueError(
                        f"History for card {card_id} has entry {seq} where {len(restored)} "
                        "was expected"
                    )
                restored.append(entry)
        return ledger

    def register_ownership(
        self, caller: Principal, card_id: CardId
    ) -> Result[None, OwnershipLedgerError]:
        """
        Register caller as the first owner of card_id.

        Any id may be registered; the card registry is not consulted.
        Fails with ALREADY_REGISTERED (code 101) if card_id already has an owner.
        """
        if card_id in self._owners:
            return self._reject(
                caller, card_id, "register ownership", OwnershipLedgerError.ALREADY_REGISTERED
            )

        self._owners[card_id] = OwnerRecord(owner=caller)
        self._history[card_id] = []
        self.undo_log.record(lambda: self._unregister(card_id))
        logger.info("Ownership of card %d registered to %s", card_id, caller)
        return Ok(None)

    def transfer_ownership(
        self,
        caller: Principal,
        card_id: CardId,
        new_owner: Principal,
        now: int,
    ) -> Result[None, OwnershipLedgerError]:
        """
        Move card_id from caller to new_owner and append the transfer to history.

        Fails with CARD_NOT_FOUND if the card has no owner record, or
        NOT_OWNER if caller does not currently own it. Transferring to the
        current owner is allowed and still recorded.
        """
        current = self._owners.get(card_id)
        if current is None:
            return self._reject(
                caller, card_id, "transfer ownership", OwnershipLedgerError.CARD_NOT_FOUND
            )
        if caller != current.owner:
            return self._reject(
                caller, card_id, "transfer ownership", OwnershipLedgerError.NOT_OWNER
            )

        history = self._history[card_id]
        index = len(history)
        entry = HistoryEntry(
            previous_owner=current.owner,
            new_owner=new_owner,
            transfer_date=now,
        )
        new_record = OwnerRecord(owner=new_owner)

        # Both objects are built before either store changes; the two
        # assignments below cannot fail.
        history.append(entry)
        self._owners[card_id] = new_record
        self.undo_log.record(lambda: self._untransfer(card_id, current))

        logger.info(
            "Card %d transferred from %s to %s at height %d (entry %d)",
            card_id,
            current.owner,
            new_owner,
            now,
            index,
        )
        return Ok(None)

    def is_registered(self, card_id: CardId) -> bool:
        return card_id in self._owners

    def get_owner(self, card_id: CardId) -> OwnerRecord | None:
        return self._owners.get(card_id)

    def get_history_entry(self, card_id: CardId, index: int) -> HistoryEntry | None:
        """Get the transfer at index. Returns None outside [0, count)."""
        history = self._history.get(card_id)
        if history is None or not 0 <= index < len(history):
            return None
        return history[index]

    def get_history_count(self, card_id: CardId) -> int:
        """Number of completed transfers. Returns 0 for unregistered cards."""
        return len(self._history.get(card_id, ()))

    def get_history(self, card_id: CardId) -> tuple[HistoryEntry, ...]:
        """All transfers for card_id in the order they happened."""
        return tuple(self._history.get(card_id, ()))

    def owners(self) -> Iterator[tuple[CardId, OwnerRecord]]:
        """Iterate over (card id, owner) pairs in card id order."""
        for card_id in sorted(self._owners):
            yield card_id, self._owners[card_id]

    def _unregister(self, card_id: CardId) -> None:
        del self._owners[card_id]
        del self._history[card_id]
        logger.info("Ownership registration of card %d rolled back", card_id)

    def _untransfer(self, card_id: CardId, previous: OwnerRecord) -> None:
        self._history[card_id].pop()
        self._owners[card_id] = previous
        logger.info("Latest transfer of card %d rolled back", card_id)

    def _reject(
        self,
        caller: Principal,
        card_id: CardId,
        action: str,
        error: OwnershipLedgerError,
    ) -> Err[OwnershipLedgerError]:
        logger.warning(
            "Rejected %s of card %d by %s: %s (code %d)",
            action,
            card_id,
            caller,
            error.value,
            error.code,
        )
        return Err(error)
