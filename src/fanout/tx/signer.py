"""
Key material handling.

Loads and saves signing keypairs in the solana-keygen JSON format
(a JSON array of the 64 secret+public key bytes).
"""

import json
from pathlib import Path

import structlog

from solders.keypair import Keypair

from fanout.core.errors import KeyLoadError

logger = structlog.get_logger(__name__)

KEYPAIR_LENGTH = 64


def load_keypair(key_path: str) -> Keypair:
    """
    Load a signing keypair from a JSON keypair file.

    Args:
        key_path: Path to the keypair file

    Returns:
        The loaded keypair

    Raises:
        KeyLoadError: If the file is absent, unreadable or malformed
    """
    if not key_path:
        raise KeyLoadError("No keypair path given")

    path = Path(key_path).expanduser()
    if not path.is_file():
        raise KeyLoadError(f"Keypair file not found: {key_path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise KeyLoadError(f"Cannot read keypair file {key_path}: {e}") from e
    except ValueError as e:
        raise KeyLoadError(f"Keypair file {key_path} is not valid JSON: {e}") from e

    if (
        not isinstance(raw, list)
        or len(raw) != KEYPAIR_LENGTH
        or not all(isinstance(b, int) and 0 <= b <= 255 for b in raw)
    ):
        raise KeyLoadError(
            f"Keypair file {key_path} must contain a JSON array of {KEYPAIR_LENGTH} bytes"
        )

    try:
        keypair = Keypair.from_bytes(bytes(raw))
    except Exception as e:
        raise KeyLoadError(f"Invalid keypair in {key_path}: {e}") from e

    logger.debug("keypair_loaded", path=key_path, pubkey=str(keypair.pubkey()))
    return keypair


def write_keypair(keypair: Keypair, key_path: str) -> Path:
    """
    Save a keypair as a JSON keypair file.

    Args:
        keypair: Keypair to save
        key_path: Destination path (parent directories are created)

    Returns:
        Path that was written
    """
    path = Path(key_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(list(bytes(keypair))), encoding="utf-8")
    path.chmod(0o600)

    logger.info("keypair_written", path=str(path), pubkey=str(keypair.pubkey()))
    return path


def generate_test_keypair() -> Keypair:
    """
    Generate a new random keypair.

    WARNING: Do not fund it on mainnet. The key is not persisted.
    """
    return Keypair()
