"""
Solana JSON-RPC adapter for node integration.

Provides blockchain access via a node's HTTP JSON-RPC interface.
"""

import itertools
from typing import Any, List, Optional

import httpx
import structlog

from solders.transaction import Transaction

from fanout.core.endpoint import Endpoint
from fanout.core.errors import EndpointUnavailable, SubmissionRejected
from fanout.node.interface import LatestBlockhash, NodeInterface, SignatureStatus
from fanout.tx.builder import serialize_transaction

logger = structlog.get_logger(__name__)


class SolanaRpcAdapter(NodeInterface):
    """
    Solana JSON-RPC adapter.

    Implements the NodeInterface with JSON-RPC 2.0 calls over HTTP(S).
    Each adapter owns its own HTTP client; create one per concurrent task.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            endpoint: Endpoint to talk to
            transport: Custom httpx transport (used by tests)
        """
        super().__init__(endpoint)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Establish connection (create HTTP client)."""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            timeout=self.endpoint.request_timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=self._transport,
        )
        logger.debug("rpc_client_opened", url=self.endpoint.url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("rpc_client_closed", url=self.endpoint.url)

    async def _rpc_call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC call and return its result.

        Raises:
            EndpointUnavailable: On transport errors, bad HTTP status or malformed response
            SubmissionRejected: If the node returns a JSON-RPC error object
        """
        if not self._client:
            await self.connect()

        request_id = next(self._ids)
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params or [],
        }

        try:
            response = await self._client.post(self.endpoint.url, json=payload)
        except httpx.RequestError as e:
            logger.error("rpc_request_error", method=method, error=str(e))
            raise EndpointUnavailable(f"RPC request {method} failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "rpc_request_failed",
                method=method,
                status=response.status_code,
                error=response.text[:200],
            )
            raise EndpointUnavailable(
                f"RPC {method} returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EndpointUnavailable(f"RPC {method} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise EndpointUnavailable(f"RPC {method} returned an unexpected response")

        error = data.get("error")
        if error is not None:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise SubmissionRejected(
                error.get("message", "Unknown RPC error"),
                error_code=error.get("code"),
                data=error.get("data"),
            )

        if "result" not in data:
            raise EndpointUnavailable(f"RPC {method} response has no result")
        return data["result"]

    async def _query(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Read-only call; node errors count as the endpoint being unavailable."""
        try:
            return await self._rpc_call(method, params)
        except SubmissionRejected as e:
            raise EndpointUnavailable(f"RPC {method} error: {e.message}") from e

    async def get_latest_blockhash(self) -> LatestBlockhash:
        """Get the latest blockhash."""
        result = await self._query(
            "getLatestBlockhash",
            [{"commitment": self.endpoint.commitment.value}],
        )
        try:
            value = result["value"]
            return LatestBlockhash(
                blockhash=str(value["blockhash"]),
                last_valid_block_height=int(value["lastValidBlockHeight"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise EndpointUnavailable(f"Malformed getLatestBlockhash response: {result!r}") from e

    async def get_block_height(self) -> int:
        """Get the current block height."""
        result = await self._query(
            "getBlockHeight",
            [{"commitment": self.endpoint.commitment.value}],
        )
        try:
            return int(result)
        except (TypeError, ValueError) as e:
            raise EndpointUnavailable(f"Malformed getBlockHeight response: {result!r}") from e

    async def send_transaction(self, tx: Transaction) -> str:
        """Submit a signed transaction."""
        try:
            signature = await self._rpc_call(
                "sendTransaction",
                [
                    serialize_transaction(tx),
                    {
                        "encoding": "base64",
                        "preflightCommitment": self.endpoint.commitment.value,
                    },
                ],
            )
        except SubmissionRejected as e:
            logger.error("tx_submit_failed", error=e.message, code=e.error_code)
            raise

        if not isinstance(signature, str):
            raise EndpointUnavailable(f"Malformed sendTransaction response: {signature!r}")

        logger.info("tx_submitted", signature=signature)
        return signature

    async def get_signature_status(self, signature: str) -> Optional[SignatureStatus]:
        """Get the status of a transaction signature."""
        result = await self._query(
            "getSignatureStatuses",
            [[signature], {"searchTransactionHistory": False}],
        )
        try:
            item = result["value"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise EndpointUnavailable(
                f"Malformed getSignatureStatuses response: {result!r}"
            ) from e

        if item is None:
            return None
        return SignatureStatus.from_rpc_item(item)
