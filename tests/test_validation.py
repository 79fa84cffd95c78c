import pytest
from fastapi import HTTPException

from app.errors import InvalidAddress
from app.validation.input import validate_address, validate_chain


class TestValidateChain:
    def test_valid_ethereum(self):
        assert validate_chain("ethereum").id == 1

    def test_valid_polygon(self):
        assert validate_chain("polygon").id == 137

    def test_case_insensitive(self):
        assert validate_chain("Arbitrum").id == 42161
        assert validate_chain("POLYGON").id == 137

    def test_strips_whitespace(self):
        assert validate_chain("  ethereum  ").key == "ethereum"

    def test_invalid_chain(self):
        with pytest.raises(HTTPException) as exc_info:
            validate_chain("solana")
        assert exc_info.value.status_code == 400
        assert "Unsupported chain" in exc_info.value.detail

    def test_empty_chain(self):
        with pytest.raises(HTTPException):
            validate_chain("")


class TestValidateAddress:
    def test_valid_address(self):
        addr = "0x" + "ab" * 20
        assert validate_address(addr) == addr

    def test_valid_address_mixed_case(self):
        addr = "0x" + "aB" * 20
        assert validate_address(addr) == addr

    def test_missing_0x_prefix(self):
        with pytest.raises(InvalidAddress):
            validate_address("ab" * 20)

    def test_too_short(self):
        with pytest.raises(InvalidAddress):
            validate_address("0x" + "ab" * 19)

    def test_too_long(self):
        with pytest.raises(InvalidAddress):
            validate_address("0x" + "ab" * 21)

    def test_invalid_hex_chars(self):
        with pytest.raises(InvalidAddress):
            validate_address("0x" + "zz" * 20)

    def test_empty_string(self):
        with pytest.raises(InvalidAddress):
            validate_address("")
