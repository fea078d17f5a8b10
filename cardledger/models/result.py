"""
Tagged operation results.

Mutating ledger operations never raise for precondition failures. They
return Ok(value) when the transition was applied, or Err(kind) when it was
rejected and nothing changed.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from cardledger.models.errors import LedgerError

T = TypeVar("T")
E = TypeVar("E", bound=LedgerError)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying the operation's value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Rejected outcome carrying the component's error kind."""

    error: E

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> int:
        return self.error.code


Result = Ok[T] | Err[E]
