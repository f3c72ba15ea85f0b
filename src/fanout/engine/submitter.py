"""
Concurrent Submission Engine.

Fans a list of transfer requests out into independent asyncio tasks, one per
request. Each task resolves, signs, submits and waits for confirmation on its
own node connection, and always ends in exactly one SubmissionOutcome.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import structlog

from fanout.core.endpoint import Endpoint
from fanout.core.errors import TransferError
from fanout.core.outcome import SubmissionOutcome
from fanout.core.request import TransferRequest
from fanout.core.resolver import resolve
from fanout.node.interface import NodeInterface
from fanout.node.rpc import SolanaRpcAdapter
from fanout.tx.builder import TransactionBuildError, build_transfer_transaction

logger = structlog.get_logger(__name__)

NodeFactory = Callable[[Endpoint], NodeInterface]
OutcomeCallback = Callable[[SubmissionOutcome], None]


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


class SubmissionEngine:
    """
    Submits transfers concurrently against a shared endpoint.

    Usage:
        ```python
        engine = SubmissionEngine(Endpoint(url="https://api.devnet.solana.com"))
        outcomes = await engine.submit_batch(requests)
        ```
    """

    def __init__(
        self,
        endpoint: Endpoint,
        node_factory: Optional[NodeFactory] = None,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        """
        Initialize the engine.

        Args:
            endpoint: Read-only endpoint shared by every task
            node_factory: Builds a node connection for one task (JSON-RPC adapter by default)
            on_outcome: Called as soon as each transfer reaches its outcome
        """
        self.endpoint = endpoint
        self.node_factory = node_factory or SolanaRpcAdapter
        self._on_outcome = on_outcome

    async def submit_batch(self, requests: Sequence[TransferRequest]) -> List[SubmissionOutcome]:
        """
        Submit every request concurrently and wait for all outcomes.

        Args:
            requests: Transfers to submit

        Returns:
            One outcome per request, in request order
        """
        if not requests:
            return []

        logger.info(
            "batch_started",
            transfers=len(requests),
            url=self.endpoint.url,
            commitment=self.endpoint.commitment.value,
        )

        tasks = [
            asyncio.create_task(self.submit_one(index, request), name=f"transfer-{index}")
            for index, request in enumerate(requests)
        ]
        outcomes = await asyncio.gather(*tasks)

        summary = BatchSummary.from_outcomes(outcomes)
        logger.info(
            "batch_completed",
            confirmed=summary.confirmed,
            failed=summary.failed,
            max_elapsed_ms=round(summary.max_elapsed_ms, 3),
        )
        return list(outcomes)

    async def submit_one(self, index: int, request: TransferRequest) -> SubmissionOutcome:
        """
        Run one transfer to its terminal outcome.

        Never raises: every failure becomes a failed outcome.
        """
        log = logger.bind(transfer_index=index)
        started = time.perf_counter()

        try:
            resolved = resolve(request)
        except TransferError as e:
            outcome = SubmissionOutcome.failed(index, e, _elapsed_ms(started))
        except Exception as e:
            log.error("transfer_resolution_crashed", error=str(e), exc_info=True)
            outcome = SubmissionOutcome.failed(index, e, _elapsed_ms(started), "unexpected")
        else:
            outcome = await self._submit_resolved(index, resolved, started, log)

        self._record(outcome, log)
        return outcome

    async def _submit_resolved(self, index, resolved, started, log) -> SubmissionOutcome:
        try:
            node = self.node_factory(self.endpoint)
        except Exception as e:
            log.error("node_creation_failed", error=str(e), exc_info=True)
            return SubmissionOutcome.failed(
                index, e, _elapsed_ms(started), "endpoint_unavailable"
            )

        try:
            await node.connect()

            latest = await node.get_latest_blockhash()
            tx = build_transfer_transaction(resolved, latest.blockhash)

            log.debug("transfer_submitting", blockhash=latest.blockhash)
            started = time.perf_counter()
            signature = await node.send_and_confirm_transaction(
                tx,
                last_valid_block_height=latest.last_valid_block_height,
            )
            return SubmissionOutcome.confirmed(index, signature, _elapsed_ms(started))

        except TransactionBuildError as e:
            return SubmissionOutcome.failed(
                index, e, _elapsed_ms(started), "endpoint_unavailable"
            )
        except TransferError as e:
            return SubmissionOutcome.failed(index, e, _elapsed_ms(started))
        except Exception as e:
            log.error("transfer_crashed", error=str(e), exc_info=True)
            return SubmissionOutcome.failed(index, e, _elapsed_ms(started), "unexpected")
        finally:
            try:
                await node.disconnect()
            except Exception as e:
                log.warning("node_disconnect_failed", error=str(e))

    def _record(self, outcome: SubmissionOutcome, log) -> None:
        if outcome.is_confirmed:
            log.info(
                "transfer_confirmed",
                signature=outcome.signature,
                elapsed_ms=round(outcome.elapsed_ms, 3),
            )
        else:
            log.warning(
                "transfer_failed",
                error_kind=outcome.error_kind,
                error=outcome.cause,
                elapsed_ms=round(outcome.elapsed_ms, 3),
            )

        if self._on_outcome:
            try:
                self._on_outcome(outcome)
            except Exception as e:
                log.error("outcome_callback_failed", error=str(e))


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate counts and timings for a finished batch."""

    total: int
    confirmed: int
    failed: int
    total_elapsed_ms: float
    max_elapsed_ms: float

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[SubmissionOutcome]) -> "BatchSummary":
        confirmed = sum(1 for o in outcomes if o.is_confirmed)
        elapsed = [o.elapsed_ms for o in outcomes]
        return cls(
            total=len(outcomes),
            confirmed=confirmed,
            failed=len(outcomes) - confirmed,
            total_elapsed_ms=sum(elapsed),
            max_elapsed_ms=max(elapsed, default=0.0),
        )

    @property
    def all_confirmed(self) -> bool:
        return self.failed == 0


async def submit_batch(
    endpoint: Endpoint,
    requests: Sequence[TransferRequest],
    node_factory: Optional[NodeFactory] = None,
    on_outcome: Optional[OutcomeCallback] = None,
) -> List[SubmissionOutcome]:
    """
    Submit a batch of transfers concurrently.

    Args:
        endpoint: Shared read-only endpoint
        requests: Transfers to submit
        node_factory: Builds a node connection for each task
        on_outcome: Called as each transfer finishes

    Returns:
        One outcome per request, in request order
    """
    engine = SubmissionEngine(endpoint, node_factory=node_factory, on_outcome=on_outcome)
    return await engine.submit_batch(requests)
