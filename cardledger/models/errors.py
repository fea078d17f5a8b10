"""
Ledger error kinds.

Each component owns a closed enumeration of the ways its operations can be
rejected. Numeric codes are scoped per component and are stable: the same
code may mean different things in different components, and within the
ownership ledger two distinct kinds share code 101.
"""

from enum import Enum


class LedgerError(Enum):
    """Base for per-component error kinds."""

    @property
    def code(self) -> int:
        """Stable numeric code reported to callers."""
        return ERROR_CODES[self]


class CardRegistryError(LedgerError):
    NOT_AUTHORIZED = "not_authorized"
    CARD_EXISTS = "card_exists"


class GradingRegistryError(LedgerError):
    NOT_AUTHORIZED = "not_authorized"
    ALREADY_GRADED = "already_graded"
    NOT_VERIFIED_GRADER = "not_verified_grader"


class OwnershipLedgerError(LedgerError):
    # Duplicate registration reports the not-found code (101). The kind is
    # kept separate so callers can tell the two apart.
    ALREADY_REGISTERED = "already_registered"
    CARD_NOT_FOUND = "card_not_found"
    NOT_OWNER = "not_owner"


ERROR_CODES: dict[LedgerError, int] = {
    CardRegistryError.NOT_AUTHORIZED: 100,
    CardRegistryError.CARD_EXISTS: 101,
    GradingRegistryError.NOT_AUTHORIZED: 100,
    GradingRegistryError.ALREADY_GRADED: 101,
    GradingRegistryError.NOT_VERIFIED_GRADER: 102,
    OwnershipLedgerError.ALREADY_REGISTERED: 101,
    OwnershipLedgerError.CARD_NOT_FOUND: 101,
    OwnershipLedgerError.NOT_OWNER: 102,
}
