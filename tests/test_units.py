"""
Unit helpers: amount scaling, balance formatting, nonces and explorer links.
"""

from decimal import Decimal

import pytest

from gasless_relay.engine.exceptions import InvalidAmountError
from gasless_relay.evm.constants import (
    DEFAULT_EXPLORER_URL,
    amount_to_value,
    format_balance,
    generate_nonce,
    get_chain_config,
    get_explorer_url,
    value_to_amount,
)


class TestAmountToValue:
    """Exact decimal -> smallest-unit conversion."""

    def test_scales_by_decimals(self):
        assert amount_to_value(amount="1.5", decimals=6) == 1_500_000
        assert amount_to_value(amount="0.000001", decimals=6) == 1
        assert amount_to_value(amount="42", decimals=6) == 42_000_000

    def test_accepts_trailing_zeros_and_bare_fraction(self):
        assert amount_to_value(amount="1.500000000", decimals=6) == 1_500_000
        assert amount_to_value(amount=".5", decimals=6) == 500_000
        assert amount_to_value(amount=" 2.25 ", decimals=6) == 2_250_000

    def test_accepts_decimal_and_int(self):
        assert amount_to_value(amount=Decimal("0.1"), decimals=6) == 100_000
        assert amount_to_value(amount=3, decimals=2) == 300

    def test_huge_amount_is_exact(self):
        amount = "123456789012345678901234567890123.123456"
        assert amount_to_value(amount=amount, decimals=6) == 123456789012345678901234567890123123456

    def test_rejects_precision_finer_than_decimals(self):
        with pytest.raises(InvalidAmountError, match="not representable"):
            amount_to_value(amount="1.0000001", decimals=6)
        with pytest.raises(InvalidAmountError):
            amount_to_value(amount="5.5", decimals=0)

    @pytest.mark.parametrize("amount", ["", "abc", "1.2.3", "1e3", "NaN", "Infinity", "0x10", "1,5", "١.٥", "１"])
    def test_rejects_malformed(self, amount):
        with pytest.raises(InvalidAmountError):
            amount_to_value(amount=amount, decimals=6)

    def test_rejects_negative(self):
        with pytest.raises(InvalidAmountError, match="non-negative"):
            amount_to_value(amount="-1", decimals=6)

    def test_rejects_float_and_non_finite_decimal(self):
        with pytest.raises(InvalidAmountError):
            amount_to_value(amount=1.5, decimals=6)
        with pytest.raises(InvalidAmountError):
            amount_to_value(amount=Decimal("NaN"), decimals=6)

    def test_invalid_decimals(self):
        with pytest.raises(ValueError):
            amount_to_value(amount="1", decimals=-1)


class TestValueToAmount:
    """Smallest-unit -> display string."""

    def test_formats(self):
        assert value_to_amount(value=1_500_000, decimals=6) == "1.5"
        assert value_to_amount(value=0, decimals=6) == "0"
        assert value_to_amount(value=1, decimals=6) == "0.000001"
        assert value_to_amount(value="42000000", decimals=6) == "42"
        assert value_to_amount(value=7, decimals=0) == "7"

    @pytest.mark.parametrize("amount", ["0", "1", "1.5", "0.000001", "100", "987654321.123456"])
    def test_round_trip(self, amount):
        assert value_to_amount(value=amount_to_value(amount=amount, decimals=6), decimals=6) == amount

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            value_to_amount(value=-1, decimals=6)


class TestFormatBalance:
    """Balance display keeps one fractional digit on whole amounts."""

    def test_whole_amounts_keep_a_fraction(self):
        assert format_balance(value=5_000_000, decimals=6) == "5.0"
        assert format_balance(value=0, decimals=6) == "0.0"
        assert format_balance(value=7, decimals=0) == "7.0"

    def test_fractional_amounts_are_unchanged(self):
        assert format_balance(value=1_500_000, decimals=6) == "1.5"
        assert format_balance(value=1, decimals=6) == "0.000001"


class TestNonce:
    def test_nonce_is_bytes32_hex(self):
        nonce = generate_nonce()
        assert nonce.startswith("0x")
        assert len(nonce) == 66
        int(nonce, 16)

    def test_nonces_are_unique(self):
        nonces = {generate_nonce() for _ in range(1000)}
        assert len(nonces) == 1000


class TestExplorer:
    def test_known_chains(self):
        assert get_explorer_url(14, "0xabc") == "https://flare-explorer.flare.network/tx/0xabc"
        assert get_explorer_url(114, "0xabc") == "https://coston2-explorer.flare.network/tx/0xabc"

    def test_unknown_chain_falls_back(self):
        assert get_explorer_url(1, "0xabc") == f"{DEFAULT_EXPLORER_URL}/tx/0xabc"
        assert get_explorer_url(None, "0xabc") == f"{DEFAULT_EXPLORER_URL}/tx/0xabc"

    def test_chain_config(self):
        config = get_chain_config(114)
        assert config.caip2 == "eip155:114"
        assert get_chain_config(999999) is None
