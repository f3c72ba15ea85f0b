"""
Transfer file loading.

Reads the YAML document describing the endpoint and the transfers to send:

    rpc_url: https://api.devnet.solana.com
    transfers:
      - from_keypair: ~/.config/solana/id.json
        to: 9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM
        amount: 0.001
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from fanout.core.request import TransferRequest

logger = structlog.get_logger(__name__)


class ConfigError(Exception):
    """Raised when the transfer file cannot be read or is invalid."""
    pass


class _DecimalLoader(yaml.SafeLoader):
    """SafeLoader that keeps YAML floats as exact Decimals."""


def _construct_decimal(loader: yaml.SafeLoader, node: yaml.Node) -> Decimal:
    text = loader.construct_scalar(node).replace("_", "")
    try:
        return Decimal(text)
    except InvalidOperation:
        # .inf / .nan spellings
        return Decimal(str(loader.construct_yaml_float(node)))


_DecimalLoader.add_constructor("tag:yaml.org,2002:float", _construct_decimal)


class TransferEntry(BaseModel):
    """One entry of the transfers list."""

    from_keypair: str = Field(min_length=1, description="Path to the signer's keypair file")
    to: str = Field(description="Destination address")
    amount: Decimal = Field(description="Amount in SOL")

    def to_request(self) -> TransferRequest:
        return TransferRequest(
            source_key_reference=self.from_keypair,
            destination=self.to,
            amount=self.amount,
        )


class TransferFile(BaseModel):
    """Top-level transfer file document."""

    rpc_url: Optional[str] = Field(default=None, description="Solana JSON-RPC URL")
    transfers: List[TransferEntry] = Field(default_factory=list)

    def to_requests(self) -> List[TransferRequest]:
        return [entry.to_request() for entry in self.transfers]


def parse_transfer_file(text: str, source: str = "<string>") -> TransferFile:
    """
    Parse a transfer file document.

    Raises:
        ConfigError: On YAML syntax errors or schema violations
    """
    try:
        data = yaml.load(text, Loader=_DecimalLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {source}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source} must contain a mapping at the top level")

    try:
        return TransferFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid transfer file {source}: {e}") from e


def load_transfer_file(path: str) -> TransferFile:
    """
    Load a transfer file from disk.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    file_path = Path(path).expanduser()
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    transfer_file = parse_transfer_file(text, source=str(file_path))
    logger.info(
        "transfer_file_loaded",
        path=str(file_path),
        transfers=len(transfer_file.transfers),
    )
    return transfer_file
