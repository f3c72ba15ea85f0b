"""
Core transfer components.

This module contains the request, outcome and endpoint models, the error
taxonomy, and the resolver that turns requests into transaction inputs.
"""

from fanout.core.endpoint import Endpoint
from fanout.core.errors import (
    ConfirmationTimeout,
    EndpointUnavailable,
    InvalidAddress,
    InvalidAmount,
    KeyLoadError,
    ResolutionError,
    SubmissionRejected,
    TransferError,
)
from fanout.core.outcome import OutcomeStatus, SubmissionOutcome
from fanout.core.request import ResolvedTransfer, TransferRequest
from fanout.core.resolver import resolve, sol_to_lamports

__all__ = [
    "Endpoint",
    "TransferError",
    "ResolutionError",
    "KeyLoadError",
    "InvalidAddress",
    "InvalidAmount",
    "EndpointUnavailable",
    "SubmissionRejected",
    "ConfirmationTimeout",
    "OutcomeStatus",
    "SubmissionOutcome",
    "ResolvedTransfer",
    "TransferRequest",
    "resolve",
    "sol_to_lamports",
]
