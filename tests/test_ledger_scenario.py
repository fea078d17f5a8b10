"""
End-to-end ledger scenario across all three components.

Components share nothing but the card id; each is driven directly.
"""

from cardledger.models.errors import GradingRegistryError
from cardledger.models.records import GradingRecord, HistoryEntry, OwnerRecord
from cardledger.models.result import Err, Ok
from cardledger.services.ledger import CardLedger

ADMIN = "SP1ADMIN000000000000000000000000000"
MANUFACTURER = "SP1MANUF000000000000000000000000001"
GRADER1 = "SP1GRADER000000000000000000000000001"
GRADER2 = "SP1GRADER000000000000000000000000002"
OWNER_A = "SP1OWNER000000000000000000000000001"
OWNER_B = "SP1OWNER000000000000000000000000002"
OWNER_C = "SP1OWNER000000000000000000000000003"


class TestCardLifecycle:
    def test_register_grade_and_transfer(self, ledger: CardLedger) -> None:
        """Register two cards, grade card 1 once, and move it A -> B -> C."""
        first = ledger.cards.register(
            MANUFACTURER, "Rare Dragon", "Fantasy Series 1", MANUFACTURER, "Mythic Rare", 1
        )
        second = ledger.cards.register(
            MANUFACTURER, "Common Goblin", "Fantasy Series 1", MANUFACTURER, "Common", 1
        )
        assert first == Ok(1)
        assert second == Ok(2)

        ledger.grading.add_grader(ADMIN, GRADER1)
        ledger.grading.add_grader(ADMIN, GRADER2)
        assert ledger.grading.grade_card(GRADER1, 1, 95, "Near mint", 100) == Ok(None)
        regrade = ledger.grading.grade_card(GRADER2, 1, 90, "Edge wear", 100)
        assert regrade == Err(GradingRegistryError.ALREADY_GRADED)
        assert regrade.code == 101
        assert ledger.grading.get_grading(1) == GradingRecord(95, GRADER1, 100, "Near mint")

        assert ledger.ownership.register_ownership(OWNER_A, 1) == Ok(None)
        assert ledger.ownership.transfer_ownership(OWNER_A, 1, OWNER_B, 101) == Ok(None)
        assert ledger.ownership.transfer_ownership(OWNER_B, 1, OWNER_C, 102) == Ok(None)

        assert ledger.ownership.get_owner(1) == OwnerRecord(owner=OWNER_C)
        assert ledger.ownership.get_history_count(1) == 2
        assert ledger.ownership.get_history_entry(1, 0) == HistoryEntry(OWNER_A, OWNER_B, 101)
        assert ledger.ownership.get_history_entry(1, 1) == HistoryEntry(OWNER_B, OWNER_C, 102)

    def test_components_do_not_cross_check(self, ledger: CardLedger) -> None:
        """Grading and ownership accept ids the card registry never issued."""
        ledger.grading.add_grader(ADMIN, GRADER1)

        assert ledger.cards.get(50) is None
        assert ledger.grading.grade_card(GRADER1, 50, 80, "", 100) == Ok(None)
        assert ledger.ownership.register_ownership(OWNER_A, 50) == Ok(None)
        assert ledger.cards.next_card_id == 1
