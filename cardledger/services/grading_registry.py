"""
Grading registry.

Records one condition grade per card id, issued by a grader on the
admin-managed allowlist.

INVARIANT: at most one GradingRecord per card id, ever. Grades are never
overwritten, and are removed only when an open undo log rolls back the
grading.

INVARIANT: the allowlist check happens before the duplicate check, so an
unverified caller always sees NOT_VERIFIED_GRADER.
"""

import logging
from collections.abc import Iterable, Iterator

from cardledger.models.errors import GradingRegistryError
from cardledger.models.records import CardId, GradingRecord, Principal
from cardledger.models.result import Err, Ok, Result
from cardledger.services.admin import AdminAuthority
from cardledger.services.undo import UndoLog

logger = logging.getLogger(__name__)


class GradingRegistry:
    """Grader allowlist and single-assignment grading store."""

    def __init__(self, admin: Principal) -> None:
        self._authority = AdminAuthority(admin)
        self._graders: set[Principal] = set()
        self._gradings: dict[CardId, GradingRecord] = {}
        self.undo_log = UndoLog()

    @classmethod
    def restore(
        cls,
        admin: Principal,
        graders: Iterable[Principal],
        gradings: Iterable[tuple[CardId, GradingRecord]],
    ) -> "GradingRegistry":
        """Rebuild a registry from a stored allowlist and gradings."""
        registry = cls(admin)
        registry._graders.update(graders)
        registry._gradings.update(gradings)
        return registry

    @property
    def admin(self) -> Principal:
        return self._authority.admin

    # --- Allowlist ---

    def add_grader(
        self, caller: Principal, grader: Principal
    ) -> Result[None, GradingRegistryError]:
        """Add a grader to the allowlist. Adding a present grader is a no-op success."""
        if not self._authority.is_admin(caller):
            return self._reject(caller, "add grader", GradingRegistryError.NOT_AUTHORIZED)

        if grader not in self._graders:
            self._graders.add(grader)
            self.undo_log.record(lambda: self._graders.discard(grader))
        logger.info("Grader %s verified by %s", grader, caller)
        return Ok(None)

    def remove_grader(
        self, caller: Principal, grader: Principal
    ) -> Result[None, GradingRegistryError]:
        """Remove a grader from the allowlist. Removing an absent grader is a no-op success."""
        if not self._authority.is_admin(caller):
            return self._reject(caller, "remove grader", GradingRegistryError.NOT_AUTHORIZED)

        if grader in self._graders:
            self._graders.discard(grader)
            self.undo_log.record(lambda: self._graders.add(grader))
        logger.info("Grader %s removed by %s", grader, caller)
        return Ok(None)

    def is_verified_grader(self, grader: Principal) -> bool:
        return grader in self._graders

    def graders(self) -> list[Principal]:
        """Current allowlist, sorted."""
        return sorted(self._graders)

    # --- Grading ---

    def grade_card(
        self,
        caller: Principal,
        card_id: CardId,
        grade: float,
        notes: str,
        now: int,
    ) -> Result[None, GradingRegistryError]:
        """
        Record a grade for card_id, stamped with the supplied clock height.

        The caller must be on the allowlist at the time of this call. The
        card id is not checked against the card registry, and the grade is
        stored as given.
        """
        if not self.is_verified_grader(caller):
            return self._reject(caller, "grade card", GradingRegistryError.NOT_VERIFIED_GRADER)

        if card_id in self._gradings:
            return self._reject(caller, "grade card", GradingRegistryError.ALREADY_GRADED)

        self._gradings[card_id] = GradingRecord(
            grade=grade,
            grader=caller,
            grading_date=now,
            notes=notes,
        )
        self.undo_log.record(lambda: self._gradings.pop(card_id))
        logger.info("Card %d graded %s by %s at height %d", card_id, grade, caller, now)
        return Ok(None)

    def has_grading(self, card_id: CardId) -> bool:
        return card_id in self._gradings

    def get_grading(self, card_id: CardId) -> GradingRecord | None:
        return self._gradings.get(card_id)

    def gradings(self) -> Iterator[tuple[CardId, GradingRecord]]:
        """Iterate over (card id, record) pairs in card id order."""
        for card_id in sorted(self._gradings):
            yield card_id, self._gradings[card_id]

    # --- Admin ---

    def transfer_admin(
        self, caller: Principal, new_admin: Principal
    ) -> Result[None, GradingRegistryError]:
        """Hand the registry admin to new_admin. Only the current admin may call this."""
        previous = self._authority.admin
        if not self._authority.transfer(caller, new_admin):
            return self._reject(caller, "transfer admin", GradingRegistryError.NOT_AUTHORIZED)

        self.undo_log.record(lambda: self._authority.transfer(new_admin, previous))
        logger.info("Grading registry admin handed from %s to %s", caller, new_admin)
        return Ok(None)

    def _reject(
        self, caller: Principal, action: str, error: GradingRegistryError
    ) -> Err[GradingRegistryError]:
        logger.warning("Rejected %s by %s: %s (code %d)", action, caller, error.value, error.code)
        return Err(error)
