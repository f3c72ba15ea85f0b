"""
Solana Transfer Fan-out

Submits a batch of independent SOL transfers concurrently, waits for each to
reach the configured commitment level, and reports a per-transfer outcome
with its latency.
"""

__version__ = "0.1.0"

from fanout.core.endpoint import Endpoint
from fanout.core.outcome import OutcomeStatus, SubmissionOutcome
from fanout.core.request import TransferRequest
from fanout.engine.submitter import SubmissionEngine, submit_batch

__all__ = [
    "Endpoint",
    "OutcomeStatus",
    "SubmissionOutcome",
    "TransferRequest",
    "SubmissionEngine",
    "submit_batch",
]
