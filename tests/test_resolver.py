"""
Test suite for transfer resolution.

Tests key loading, address parsing and amount conversion.
"""

import json
from decimal import Decimal

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from fanout.core.errors import InvalidAddress, InvalidAmount, KeyLoadError
from fanout.core.request import ResolvedTransfer, TransferRequest
from fanout.core.resolver import (
    LAMPORTS_PER_SOL,
    MAX_LAMPORTS,
    parse_address,
    resolve,
    sol_to_lamports,
)
from fanout.tx.signer import load_keypair, write_keypair


# ============================================================================
# Test Amount Conversion
# ============================================================================

class TestSolToLamports:
    """Tests for SOL to lamport conversion."""

    def test_whole_sol(self):
        assert sol_to_lamports(Decimal("1")) == LAMPORTS_PER_SOL
        assert sol_to_lamports(Decimal("2.5")) == 2_500_000_000

    def test_smallest_unit(self):
        assert sol_to_lamports(Decimal("0.000000001")) == 1

    def test_zero_is_allowed(self):
        assert sol_to_lamports(Decimal("0")) == 0

    def test_rounds_to_nearest_lamport(self):
        assert sol_to_lamports(Decimal("0.0000000014")) == 1
        assert sol_to_lamports(Decimal("0.0000000015")) == 2

    def test_float_input_keeps_decimal_text(self):
        """Floats are converted through their text form, not their binary value."""
        assert sol_to_lamports(0.1) == 100_000_000

    def test_negative_amount(self):
        with pytest.raises(InvalidAmount, match="negative"):
            sol_to_lamports(Decimal("-1"))

    def test_not_a_number(self):
        with pytest.raises(InvalidAmount):
            sol_to_lamports(Decimal("NaN"))
        with pytest.raises(InvalidAmount):
            sol_to_lamports("abc")

    def test_infinite(self):
        with pytest.raises(InvalidAmount, match="finite"):
            sol_to_lamports(Decimal("Infinity"))

    def test_overflow(self):
        with pytest.raises(InvalidAmount, match="maximum"):
            sol_to_lamports(Decimal("1e30"))

    def test_upper_bound(self):
        max_sol = Decimal(MAX_LAMPORTS) / LAMPORTS_PER_SOL
        assert sol_to_lamports(max_sol) == MAX_LAMPORTS

    def test_long_amount_rounds_once(self):
        """Amounts with more digits than the default context still round a single time."""
        assert sol_to_lamports(Decimal("10000000000.0000000004999999999")) == 10_000_000_000_000_000_000
        assert sol_to_lamports(Decimal("10000000000.0000000005000000001")) == 10_000_000_000_000_000_001


# ============================================================================
# Test Address Parsing
# ============================================================================

class TestParseAddress:
    """Tests for destination address parsing."""

    def test_valid_address(self, address_factory):
        address = address_factory()
        pubkey = parse_address(address)

        assert isinstance(pubkey, Pubkey)
        assert str(pubkey) == address

    def test_surrounding_whitespace_ignored(self, address_factory):
        address = address_factory()
        assert str(parse_address(f"  {address} ")) == address

    def test_malformed_address(self):
        with pytest.raises(InvalidAddress):
            parse_address("not-a-valid-address")

    def test_wrong_length(self):
        with pytest.raises(InvalidAddress):
            parse_address("1111")

    def test_empty_address(self):
        with pytest.raises(InvalidAddress, match="empty"):
            parse_address("")


# ============================================================================
# Test Key Loading
# ============================================================================

class TestLoadKeypair:
    """Tests for JSON keypair file loading."""

    def test_load_written_keypair(self, tmp_path):
        keypair = Keypair()
        path = write_keypair(keypair, str(tmp_path / "keys" / "id.json"))

        loaded = load_keypair(str(path))

        assert loaded.pubkey() == keypair.pubkey()

    def test_missing_file(self, tmp_path):
        with pytest.raises(KeyLoadError, match="not found"):
            load_keypair(str(tmp_path / "missing.json"))

    def test_empty_reference(self):
        with pytest.raises(KeyLoadError):
            load_keypair("")

    def test_not_json(self, tmp_path):
        path = tmp_path / "id.json"
        path.write_text("definitely not json")

        with pytest.raises(KeyLoadError, match="not valid JSON"):
            load_keypair(str(path))

    def test_wrong_length(self, tmp_path):
        path = tmp_path / "id.json"
        path.write_text(json.dumps([1, 2, 3]))

        with pytest.raises(KeyLoadError, match="64 bytes"):
            load_keypair(str(path))

    def test_values_out_of_byte_range(self, tmp_path):
        path = tmp_path / "id.json"
        path.write_text(json.dumps([256] * 64))

        with pytest.raises(KeyLoadError):
            load_keypair(str(path))

    def test_directory_is_not_a_key(self, tmp_path):
        with pytest.raises(KeyLoadError):
            load_keypair(str(tmp_path))


# ============================================================================
# Test Resolve
# ============================================================================

class TestResolve:
    """Tests for full request resolution."""

    def test_resolve_valid_request(self, make_request, keypair, address_factory):
        destination = address_factory()
        request = make_request(destination=destination, amount="0.25")

        resolved = resolve(request)

        assert isinstance(resolved, ResolvedTransfer)
        assert resolved.source == keypair.pubkey()
        assert str(resolved.destination) == destination
        assert resolved.lamports == 250_000_000

    def test_key_failure_reported_first(self, tmp_path):
        """An unreadable key fails even when the other fields are also bad."""
        request = TransferRequest(
            source_key_reference=str(tmp_path / "missing.json"),
            destination="bad",
            amount=Decimal("-1"),
        )

        with pytest.raises(KeyLoadError):
            resolve(request)

    def test_invalid_address(self, make_request):
        with pytest.raises(InvalidAddress):
            resolve(make_request(destination="0OIl-invalid"))

    def test_negative_amount(self, make_request):
        with pytest.raises(InvalidAmount):
            resolve(make_request(amount="-1"))

    def test_resolution_is_repeatable(self, make_request):
        request = make_request(amount="1.5")

        first = resolve(request)
        second = resolve(request)

        assert first.lamports == second.lamports
        assert first.destination == second.destination
        assert first.keypair is not second.keypair


class TestTransferRequest:
    """Tests for the request model."""

    def test_from_dict(self):
        request = TransferRequest.from_dict(
            {"from_keypair": "id.json", "to": "addr", "amount": 0.5}
        )

        assert request.source_key_reference == "id.json"
        assert request.destination == "addr"
        assert request.amount == Decimal("0.5")

    def test_is_immutable(self):
        request = TransferRequest("id.json", "addr", Decimal("1"))

        with pytest.raises(AttributeError):
            request.amount = Decimal("2")
