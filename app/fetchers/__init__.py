from app.fetchers.transfer_fetcher import fetch_wallet_transactions
from app.fetchers.sample_data import sample_transactions

__all__ = ["fetch_wallet_transactions", "sample_transactions"]
