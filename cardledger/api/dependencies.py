"""
Shared request dependencies.

The caller principal arrives pre-authenticated in the X-Principal header.
The ledger lives on app.state for the lifetime of the process.
Mutating routes apply the ledger change, write it through and commit inside
one ledger transaction, so a failed write leaves the ledger untouched.
"""

from typing import Annotated, TypeVar

from fastapi import Depends, Header, Request

from cardledger.models.errors import LedgerError
from cardledger.models.failure import LedgerRejectedError
from cardledger.models.result import Err, Result
from cardledger.services.ledger import CardLedger

T = TypeVar("T")

PRINCIPAL_HEADER = "X-Principal"


async def get_ledger(request: Request) -> CardLedger:
    """
    Dependency that provides the process-wide ledger.

    Waits out any transaction in flight, so a read never sees a mutation
    whose storage write may still be rolled back.
    """
    ledger: CardLedger = request.app.state.ledger
    await ledger.settled()
    return ledger


Caller = Annotated[str, Header(alias=PRINCIPAL_HEADER, min_length=1)]
Ledger = Annotated[CardLedger, Depends(get_ledger)]


def unwrap(result: Result[T, LedgerError]) -> T:
    """Return an Ok value, or raise LedgerRejectedError for an Err."""
    if isinstance(result, Err):
        raise LedgerRejectedError(result.error)
    return result.value
