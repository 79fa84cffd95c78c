import re

from fastapi import HTTPException

from app.chains import get_chain_by_key, list_chains
from app.errors import InvalidAddress
from app.models.chain import ChainDescriptor

EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def validate_address(address: str) -> str:
    if not address or not EVM_ADDRESS_RE.match(address):
        raise InvalidAddress(f"Invalid wallet address: {address!r}")
    return address


def validate_chain(chain: str) -> ChainDescriptor:
    descriptor = get_chain_by_key(chain)
    if descriptor is None:
        supported = ", ".join(c.key for c in list_chains())
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported chain '{chain.lower().strip()}'. Supported: {supported}",
        )
    return descriptor
