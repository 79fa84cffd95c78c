from __future__ import annotations

from pydantic import BaseModel


class ChainDescriptor(BaseModel):
    model_config = {"frozen": True}

    key: str
    id: int
    name: str
    rpc_url: str
    explorer_url: str
    currency: str
    currency_symbol: str

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"
