"""
Unit tests for input validators.
"""

import pytest

from bcwallet.utils.validation import (
    MAX_AMOUNT,
    validate_amount,
    validate_hex_string,
    validate_wallet_name,
)


class TestWalletName:

    @pytest.mark.parametrize("name", ["abc\n", "abc\r\n", "abc\ndef", " abc"])
    def test_rejects_line_breaks_and_spaces(self, name):
        valid, err = validate_wallet_name(name)
        assert not valid
        assert err

    def test_accepts_plain_name(self):
        assert validate_wallet_name("alice.v2") == (True, "")


class TestAmount:

    def test_bounds(self):
        assert validate_amount(1)[0]
        assert validate_amount(MAX_AMOUNT)[0]
        assert not validate_amount(0)[0]
        assert not validate_amount(MAX_AMOUNT + 1)[0]

    def test_rejects_bool(self):
        assert not validate_amount(True)[0]


class TestHexString:

    def test_expected_length(self):
        assert validate_hex_string("ab" * 32, "txid", expected_bytes=32)[0]
        valid, err = validate_hex_string("ab" * 300, "txid", expected_bytes=32)
        assert not valid
        assert "32 bytes" in err

    def test_prefix_and_empty(self):
        assert validate_hex_string("0xabcd", "value")[0]
        assert not validate_hex_string("0x", "value")[0]
