from cardledger.db.database import get_session, init_db
from cardledger.db.operations import (
    CARD_REGISTRY,
    GRADING_REGISTRY,
    card_to_record,
    get_registry_admin,
    grading_to_record,
    history_to_entry,
    insert_card,
    insert_grading,
    insert_owner,
    load_ledger,
    record_transfer,
    set_grader,
    set_registry_admin,
)

__all__ = [
    "CARD_REGISTRY",
    "GRADING_REGISTRY",
    "card_to_record",
    "get_registry_admin",
    "get_session",
    "grading_to_record",
    "history_to_entry",
    "init_db",
    "insert_card",
    "insert_grading",
    "insert_owner",
    "load_ledger",
    "record_transfer",
    "set_grader",
    "set_registry_admin",
]
