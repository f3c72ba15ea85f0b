"""
Pytest configuration and shared fixtures for the test suite.
"""

import asyncio
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from solders.keypair import Keypair
from solders.transaction import Transaction

from fanout.config import CommitmentLevel, FanoutConfig
from fanout.core.endpoint import Endpoint
from fanout.core.errors import EndpointUnavailable, SubmissionRejected
from fanout.core.request import TransferRequest
from fanout.node.interface import LatestBlockhash, NodeInterface, SignatureStatus
from fanout.tx.builder import transaction_signature
from fanout.tx.signer import write_keypair


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> FanoutConfig:
    """Create a test configuration."""
    return FanoutConfig(
        rpc_url="http://localhost:8899",
        commitment=CommitmentLevel.CONFIRMED,
        confirmation_timeout_seconds=5,
        poll_interval_seconds=0.01,
        request_timeout_seconds=5,
        log_level="DEBUG",
    )


@pytest.fixture
def endpoint(test_config) -> Endpoint:
    """Create a test endpoint with fast polling."""
    return Endpoint.from_config(test_config)


# ============================================================================
# Test Data Generators
# ============================================================================

def generate_address() -> str:
    """Generate a fresh, valid base58 address."""
    return str(Keypair().pubkey())


def generate_blockhash() -> str:
    """Generate a valid base58 blockhash (any 32 bytes will do)."""
    return str(Keypair().pubkey())


@pytest.fixture
def address_factory():
    """Factory for fresh destination addresses."""
    return generate_address


@pytest.fixture
def blockhash_factory():
    """Factory for fresh blockhashes."""
    return generate_blockhash


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def keypair_file(tmp_path, keypair) -> str:
    """Write a keypair to a temporary JSON keypair file."""
    path = tmp_path / "sender.json"
    write_keypair(keypair, str(path))
    return str(path)


@pytest.fixture
def make_request(keypair_file):
    """Build transfer requests signed by the temporary keypair by default."""
    def _make(
        destination: Optional[str] = None,
        amount="0.001",
        key_path: Optional[str] = None,
    ) -> TransferRequest:
        return TransferRequest(
            source_key_reference=key_path or keypair_file,
            destination=destination or generate_address(),
            amount=Decimal(str(amount)),
        )
    return _make


# ============================================================================
# Mock Node Interface
# ============================================================================

def transfer_destination(tx: Transaction) -> str:
    """Destination of a system transfer (payer first, recipient second)."""
    return str(tx.message.account_keys[1])


class MockNetwork:
    """
    Shared state behind every mock node created for a test.

    Behaviour is keyed by destination address so individual transfers in a
    batch can be slowed down, hung or rejected.
    """

    def __init__(self):
        self.blockhash = generate_blockhash()
        self.nodes: List["MockNodeInterface"] = []
        self.calls: List[tuple] = []
        self.statuses: Dict[str, SignatureStatus] = {}
        self.delays: Dict[str, float] = {}
        self.hangs: Dict[str, asyncio.Event] = {}
        self.rejections: Dict[str, str] = {}
        self.on_chain_errors: Dict[str, dict] = {}
        self.blockhash_error: Optional[Exception] = None

    def node_factory(self, endpoint: Endpoint) -> "MockNodeInterface":
        node = MockNodeInterface(endpoint, self)
        self.nodes.append(node)
        return node

    def calls_for(self, destination: str) -> List[str]:
        return [method for method, dest in self.calls if dest == destination]

    def delay(self, destination: str, seconds: float) -> None:
        self.delays[destination] = seconds

    def hang(self, destination: str, release: asyncio.Event) -> None:
        self.hangs[destination] = release

    def reject(self, destination: str, message: str) -> None:
        self.rejections[destination] = message

    def fail_on_chain(self, destination: str, err: dict) -> None:
        self.on_chain_errors[destination] = err


class MockNodeInterface(NodeInterface):
    """Mock node interface for testing."""

    def __init__(self, endpoint: Endpoint, network: MockNetwork):
        super().__init__(endpoint)
        self.network = network
        self.connected = False
        self.disconnected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.disconnected = True

    async def get_latest_blockhash(self) -> LatestBlockhash:
        self.network.calls.append(("getLatestBlockhash", None))
        if self.network.blockhash_error:
            raise self.network.blockhash_error
        return LatestBlockhash(
            blockhash=self.network.blockhash,
            last_valid_block_height=1_000,
        )

    async def get_block_height(self) -> int:
        return 900

    async def send_transaction(self, tx: Transaction) -> str:
        destination = transfer_destination(tx)
        self.network.calls.append(("sendTransaction", destination))

        if destination in self.network.hangs:
            await self.network.hangs[destination].wait()
        if destination in self.network.delays:
            await asyncio.sleep(self.network.delays[destination])
        if destination in self.network.rejections:
            raise SubmissionRejected(self.network.rejections[destination], error_code=-32002)

        signature = transaction_signature(tx)
        self.network.statuses[signature] = SignatureStatus(
            slot=42,
            confirmations=1,
            err=self.network.on_chain_errors.get(destination),
            confirmation_status="confirmed",
        )
        return signature

    async def get_signature_status(self, signature: str) -> Optional[SignatureStatus]:
        return self.network.statuses.get(signature)


@pytest.fixture
def network() -> MockNetwork:
    """Create a mock network."""
    return MockNetwork()


@pytest.fixture
def unreachable() -> EndpointUnavailable:
    return EndpointUnavailable("RPC request getLatestBlockhash failed: connection refused")
