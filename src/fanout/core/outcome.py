"""
Submission outcome model.

One outcome is produced per transfer request, whether it confirmed or failed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeStatus(str, Enum):
    """Terminal status of a transfer."""
    CONFIRMED = "confirmed"       # Reached the configured commitment level
    FAILED = "failed"             # Resolution, endpoint or ledger failure


@dataclass(frozen=True)
class SubmissionOutcome:
    """
    Result of a single transfer attempt.

    Attributes:
        index: Position of the request in the submitted batch
        status: Confirmed or failed
        elapsed_ms: Wall-clock duration of the attempt in milliseconds
        signature: Transaction signature (confirmed outcomes)
        cause: Human-readable failure cause (failed outcomes)
        error_kind: Taxonomy name of the failure (failed outcomes)
    """

    index: int
    status: OutcomeStatus
    elapsed_ms: float
    signature: Optional[str] = None
    cause: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def confirmed(cls, index: int, signature: str, elapsed_ms: float) -> "SubmissionOutcome":
        return cls(
            index=index,
            status=OutcomeStatus.CONFIRMED,
            elapsed_ms=max(0.0, elapsed_ms),
            signature=signature,
        )

    @classmethod
    def failed(
        cls,
        index: int,
        error: Exception,
        elapsed_ms: float,
        error_kind: Optional[str] = None,
    ) -> "SubmissionOutcome":
        """Build a failed outcome from the exception that ended the attempt."""
        return cls(
            index=index,
            status=OutcomeStatus.FAILED,
            elapsed_ms=max(0.0, elapsed_ms),
            cause=str(error) or type(error).__name__,
            error_kind=error_kind or getattr(error, "kind", "unexpected"),
        )

    @property
    def is_confirmed(self) -> bool:
        return self.status == OutcomeStatus.CONFIRMED

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "status": self.status.value,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "signature": self.signature,
            "cause": self.cause,
            "error_kind": self.error_kind,
        }
