from cardledger.services.admin import AdminAuthority
from cardledger.services.card_registry import FIRST_CARD_ID, CardRegistry
from cardledger.services.grading_registry import GradingRegistry
from cardledger.services.ledger import CardLedger
from cardledger.services.ownership_ledger import OwnershipLedger
from cardledger.services.undo import UndoLog

__all__ = [
    "AdminAuthority",
    "CardLedger",
    "CardRegistry",
    "FIRST_CARD_ID",
    "GradingRegistry",
    "OwnershipLedger",
    "UndoLog",
]
