"""
Tests for the response envelope and its authority boundary.

Every user-visible response must pass through finalize_response(), and
ledger rejections must carry their numeric code unchanged.
"""

import pytest

from cardledger.models.errors import (
    CardRegistryError,
    GradingRegistryError,
    OwnershipLedgerError,
)
from cardledger.models.failure import (
    UNKNOWN_FAILURE_MESSAGE,
    ApiResponse,
    FailureDetail,
    FailureKind,
    LedgerRejectedError,
    NotFoundError,
    OutcomeType,
    create_known_failure,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)


class TestFinalizeResponse:
    def test_success_response_is_finalized(self) -> None:
        response = ApiResponse(outcome=OutcomeType.SUCCESS, data={"key": "value"})
        finalized = finalize_response(response)

        assert is_finalized(finalized)
        assert finalized.outcome == OutcomeType.SUCCESS

    def test_unfinalized_response_not_marked(self) -> None:
        """Responses that bypass the boundary are detectable."""
        response = ApiResponse(outcome=OutcomeType.SUCCESS, data={"key": "value"})

        assert not is_finalized(response)

    def test_success_with_failure_raises(self) -> None:
        response = ApiResponse(
            outcome=OutcomeType.SUCCESS,
            failure=FailureDetail(kind=FailureKind.UNKNOWN, message="x"),
        )

        with pytest.raises(ValueError, match="must not have failure"):
            finalize_response(response)

    def test_failure_without_detail_raises(self) -> None:
        response = ApiResponse(outcome=OutcomeType.KNOWN_FAILURE)

        with pytest.raises(ValueError, match="must have failure details"):
            finalize_response(response)


class TestFactories:
    def test_create_success(self) -> None:
        response = create_success({"card_id": 1})

        assert is_finalized(response)
        assert response.data == {"card_id": 1}
        assert response.failure is None

    def test_create_known_failure_carries_code(self) -> None:
        response = create_known_failure(FailureKind.NOT_OWNER, "Not the owner.", code=102)

        assert is_finalized(response)
        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure.code == 102

    def test_create_unknown_failure_hides_message(self) -> None:
        """Unknown failures use the fixed message and report only the exception type."""
        response = create_unknown_failure(RuntimeError("database password is hunter2"))

        assert is_finalized(response)
        assert response.failure.kind == FailureKind.UNKNOWN
        assert response.failure.message == UNKNOWN_FAILURE_MESSAGE
        assert response.failure.detail == "RuntimeError"


class TestLedgerRejectedError:
    @pytest.mark.parametrize(
        ("error", "kind", "code", "status_code"),
        [
            (CardRegistryError.NOT_AUTHORIZED, FailureKind.NOT_AUTHORIZED, 100, 403),
            (CardRegistryError.CARD_EXISTS, FailureKind.CARD_EXISTS, 101, 409),
            (GradingRegistryError.NOT_AUTHORIZED, FailureKind.NOT_AUTHORIZED, 100, 403),
            (GradingRegistryError.ALREADY_GRADED, FailureKind.ALREADY_GRADED, 101, 409),
            (
                GradingRegistryError.NOT_VERIFIED_GRADER,
                FailureKind.NOT_VERIFIED_GRADER,
                102,
                403,
            ),
            (
                OwnershipLedgerError.ALREADY_REGISTERED,
                FailureKind.ALREADY_REGISTERED,
                101,
                409,
            ),
            (OwnershipLedgerError.CARD_NOT_FOUND, FailureKind.CARD_NOT_FOUND, 101, 404),
            (OwnershipLedgerError.NOT_OWNER, FailureKind.NOT_OWNER, 102, 403),
        ],
    )
    def test_maps_every_ledger_error(self, error, kind, code, status_code) -> None:
        exc = LedgerRejectedError(error)

        assert exc.kind == kind
        assert exc.code == code
        assert exc.status_code == status_code
        assert exc.error is error

    def test_to_response_is_finalized(self) -> None:
        response = LedgerRejectedError(OwnershipLedgerError.NOT_OWNER).to_response()

        assert is_finalized(response)
        assert response.failure.kind == FailureKind.NOT_OWNER
        assert response.failure.code == 102

    def test_not_found_error(self) -> None:
        exc = NotFoundError("card 9")

        assert exc.status_code == 404
        assert exc.code is None
        assert exc.to_response().failure.kind == FailureKind.NOT_FOUND
