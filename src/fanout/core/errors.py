"""
Error taxonomy for transfer submission.

Every failure a single transfer can hit maps onto one of these classes.
The submission engine converts them into failed outcomes at the task boundary.
"""

from typing import Any, Optional


class TransferError(Exception):
    """Base class for all per-transfer failures."""

    kind = "transfer_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResolutionError(TransferError):
    """Raised when a transfer request cannot be turned into transaction inputs."""

    kind = "resolution_error"


class KeyLoadError(ResolutionError):
    """Signing key material is missing, unreadable or malformed."""

    kind = "key_load_error"


class InvalidAddress(ResolutionError):
    """Destination is not a valid public key."""

    kind = "invalid_address"


class InvalidAmount(ResolutionError):
    """Amount is negative or cannot be represented in lamports."""

    kind = "invalid_amount"


class EndpointUnavailable(TransferError):
    """The RPC endpoint could not be reached or returned a malformed response."""

    kind = "endpoint_unavailable"


class SubmissionRejected(TransferError):
    """The ledger rejected the transaction."""

    kind = "submission_rejected"

    def __init__(self, message: str, error_code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.error_code = error_code
        self.data = data


class ConfirmationTimeout(TransferError):
    """The transaction did not reach the required commitment in time."""

    kind = "confirmation_timeout"
