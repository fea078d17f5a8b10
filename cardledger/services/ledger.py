"""
The card ledger: the three components side by side.

Components never call each other. The card id is the only key they share,
and keeping them consistent (e.g. grading only registered cards) is up to
the caller.

Mutations that must also reach storage run inside transaction(). Only one
transaction runs at a time, and one that raises leaves every component as
it found it.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from cardledger.config import Settings
from cardledger.services.card_registry import CardRegistry
from cardledger.services.grading_registry import GradingRegistry
from cardledger.services.ownership_ledger import OwnershipLedger
from cardledger.services.undo import UndoLog

logger = logging.getLogger(__name__)


@dataclass
class CardLedger:
    """Independent card, grading and ownership state machines."""

    cards: CardRegistry
    grading: GradingRegistry
    ownership: OwnershipLedger
    _write_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CardLedger":
        """Create an empty ledger with each registry's bootstrap admin."""
        return cls(
            cards=CardRegistry(settings.card_registry_admin),
            grading=GradingRegistry(settings.grading_registry_admin),
            ownership=OwnershipLedger(),
        )

    @property
    def _undo_logs(self) -> tuple[UndoLog, ...]:
        return (self.cards.undo_log, self.grading.undo_log, self.ownership.undo_log)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["CardLedger"]:
        """
        Keep the block's mutations only if the block completes.

        Mutations made inside the block are undone if it raises, including
        when a storage write or commit awaited inside it fails or the
        request is cancelled. Transactions are serialized.
        """
        async with self._write_lock:
            logs = self._undo_logs
            for log in logs:
                log.begin()
            try:
                yield self
            except BaseException:
                undone = sum(len(log) for log in logs)
                for log in logs:
                    log.rollback()
                if undone:
                    logger.warning("Rolled back %d ledger mutation(s)", undone)
                raise
            for log in logs:
                log.commit()

    async def settled(self) -> None:
        """Wait until no transaction is in flight."""
        async with self._write_lock:
            pass
