"""
Transfer Descriptor Resolver.

Turns a declarative TransferRequest into a ResolvedTransfer: a loaded
keypair, a parsed destination and an integer lamport amount. Performs no
network I/O.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

import structlog

from solders.pubkey import Pubkey

from fanout.core.errors import InvalidAddress, InvalidAmount
from fanout.core.request import ResolvedTransfer, TransferRequest
from fanout.tx.signer import load_keypair

logger = structlog.get_logger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000
MAX_LAMPORTS = 2**64 - 1


def sol_to_lamports(amount: Union[Decimal, int, float, str]) -> int:
    """
    Convert an amount in SOL to lamports.

    Rounds half-up to the nearest lamport.

    Raises:
        InvalidAmount: If the amount is negative, not finite, or overflows u64
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmount(f"Amount {amount!r} is not a number") from e

    if not value.is_finite():
        raise InvalidAmount(f"Amount {amount} is not a finite number")
    if value < 0:
        raise InvalidAmount(f"Amount {amount} is negative")

    with localcontext() as ctx:
        ctx.prec = len(value.as_tuple().digits) + 20
        scaled = value * LAMPORTS_PER_SOL
        if scaled > MAX_LAMPORTS + 1:
            raise InvalidAmount(f"Amount {amount} exceeds the maximum transferable lamports")
        lamports = int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    if lamports > MAX_LAMPORTS:
        raise InvalidAmount(f"Amount {amount} exceeds the maximum transferable lamports")
    return lamports


def parse_address(address: str) -> Pubkey:
    """
    Parse a base58 address.

    Raises:
        InvalidAddress: If the address is not a valid public key
    """
    if not isinstance(address, str) or not address.strip():
        raise InvalidAddress("Destination address is empty")
    try:
        return Pubkey.from_string(address.strip())
    except Exception as e:
        raise InvalidAddress(f"Invalid destination address {address!r}: {e}") from e


def resolve(request: TransferRequest) -> ResolvedTransfer:
    """
    Resolve a transfer request.

    Steps run in order: load key, parse destination, convert amount.
    The first failure is raised.

    Raises:
        KeyLoadError: Key material missing or malformed
        InvalidAddress: Destination malformed
        InvalidAmount: Amount negative or unrepresentable
    """
    keypair = load_keypair(request.source_key_reference)
    destination = parse_address(request.destination)
    lamports = sol_to_lamports(request.amount)

    logger.debug(
        "transfer_resolved",
        source=str(keypair.pubkey()),
        destination=str(destination),
        lamports=lamports,
    )
    return ResolvedTransfer(keypair=keypair, destination=destination, lamports=lamports)
