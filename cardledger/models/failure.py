"""
Response Envelope — Unified Outcome Classification.

Every HTTP endpoint answers with an ApiResponse. Ledger rejections are
known failures and carry the component's numeric error code verbatim;
anything the ledger did not anticipate is an unknown failure.

AUTHORITY BOUNDARY:
All user-visible responses MUST pass through `finalize_response()`.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from cardledger.models.errors import LedgerError


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Authorization
    NOT_AUTHORIZED = "not_authorized"
    NOT_VERIFIED_GRADER = "not_verified_grader"
    NOT_OWNER = "not_owner"

    # Duplicates
    CARD_EXISTS = "card_exists"
    ALREADY_GRADED = "already_graded"
    ALREADY_REGISTERED = "already_registered"

    # Missing records
    CARD_NOT_FOUND = "card_not_found"
    NOT_FOUND = "not_found"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="Explanation of what went wrong",
    )
    code: int | None = Field(
        default=None,
        description="Component-scoped ledger error code (100, 101, 102)",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope for all API endpoints.

    Every response is classified into one of three outcome types.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Raised inside request handlers and rendered by the application's
    exception handler.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        code: int | None = None,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.code = code
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to a finalized ApiResponse."""
        return create_known_failure(
            kind=self.kind,
            message=self.message,
            code=self.code,
            detail=self.detail,
        )


# HTTP status per ledger error kind value. Authorization failures are 403,
# duplicates 409, missing records 404.
_LEDGER_STATUS: dict[str, int] = {
    "not_authorized": 403,
    "not_verified_grader": 403,
    "not_owner": 403,
    "card_exists": 409,
    "already_graded": 409,
    "already_registered": 409,
    "card_not_found": 404,
}

_LEDGER_MESSAGES: dict[str, str] = {
    "not_authorized": "Caller is not the admin of this registry.",
    "not_verified_grader": "Caller is not a verified grader.",
    "not_owner": "Caller is not the current owner of this card.",
    "card_exists": "A card with this id already exists.",
    "already_graded": "This card has already been graded.",
    "already_registered": "Ownership of this card is already registered.",
    "card_not_found": "No ownership record exists for this card.",
}


class LedgerRejectedError(KnownError):
    """A ledger operation returned Err; carries its kind and code unchanged."""

    def __init__(self, error: LedgerError, detail: str | None = None):
        self.error = error
        super().__init__(
            kind=FailureKind(error.value),
            message=_LEDGER_MESSAGES[error.value],
            code=error.code,
            detail=detail,
            status_code=_LEDGER_STATUS[error.value],
        )


class NotFoundError(KnownError):
    """A read found no record. Reads never fail inside the ledger itself."""

    def __init__(self, what: str):
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"No {what} found.",
            status_code=404,
        )


# =============================================================================
# AUTHORITY BOUNDARY
# =============================================================================

UNKNOWN_FAILURE_MESSAGE = "The ledger failed unexpectedly. Retry the request."

# Track finalized responses
_finalized_responses: set[int] = set()


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Finalize a response through the authority boundary.

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    else:
        if response.failure is None:
            raise ValueError(f"{response.outcome.value} response must have failure details")

    _finalized_responses.add(id(response))

    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    """Check if a response has passed through the authority boundary."""
    return id(response) in _finalized_responses


def create_success(data: T) -> ApiResponse[T]:
    """Create a finalized success response."""
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    return finalize_response(response)


def create_known_failure(
    kind: FailureKind,
    message: str,
    code: int | None = None,
    detail: str | None = None,
) -> ApiResponse[Any]:
    """Create a finalized known failure response."""
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.KNOWN_FAILURE,
        failure=FailureDetail(kind=kind, message=message, code=code, detail=detail),
    )
    return finalize_response(response)


def create_unknown_failure(exception: Exception) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed; only the exception type is reported.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=UNKNOWN_FAILURE_MESSAGE,
            detail=type(exception).__name__,
        ),
    )
    return finalize_response(response)
