from cardledger.models.errors import (
    ERROR_CODES,
    CardRegistryError,
    GradingRegistryError,
    LedgerError,
    OwnershipLedgerError,
)
from cardledger.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    LedgerRejectedError,
    NotFoundError,
    OutcomeType,
    create_known_failure,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from cardledger.models.records import (
    CardId,
    CardRecord,
    GradingRecord,
    HistoryEntry,
    OwnerRecord,
    Principal,
)
from cardledger.models.result import Err, Ok, Result

__all__ = [
    "ApiResponse",
    "CardId",
    "CardRecord",
    "CardRegistryError",
    "ERROR_CODES",
    "Err",
    "FailureDetail",
    "FailureKind",
    "GradingRecord",
    "GradingRegistryError",
    "HistoryEntry",
    "KnownError",
    "LedgerError",
    "LedgerRejectedError",
    "NotFoundError",
    "Ok",
    "OutcomeType",
    "OwnerRecord",
    "OwnershipLedgerError",
    "Principal",
    "Result",
    "create_known_failure",
    "create_success",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
]
