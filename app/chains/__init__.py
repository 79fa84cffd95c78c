from app.chains.registry import (
    CHAINS,
    DEFAULT_CHAIN_KEY,
    get_chain_by_id,
    get_chain_by_key,
    list_chains,
)

__all__ = ["CHAINS", "DEFAULT_CHAIN_KEY", "get_chain_by_id", "get_chain_by_key", "list_chains"]
