import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from app.chains import get_chain_by_key, list_chains
from app.models.chain import ChainDescriptor
from app.models.transaction import FetchState, TransactionRecord
from app.orchestrator import orchestrator
from app.validation.input import validate_chain

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("app.main")

app = FastAPI(title="Wallet Transfer History API", version="0.1.0")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("INCOMING REQUEST: %s %s", request.method, request.url.path)
    response = await call_next(request)
    logger.info(
        "RESPONSE: %s %s -> %s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


class FetchRequest(BaseModel):
    address: Optional[str] = None
    chain: str
    is_connected: bool = True


def _chain_view(chain: ChainDescriptor) -> dict:
    return chain.model_dump(exclude={"rpc_url"})


def _transaction_view(tx: TransactionRecord) -> dict:
    data = tx.model_dump()
    chain = get_chain_by_key(tx.network)
    data["explorer_url"] = chain.tx_url(tx.hash) if chain else None
    return data


def _state_view(state: FetchState) -> dict:
    return {
        "transactions": [_transaction_view(tx) for tx in state.transactions],
        "is_loading": state.is_loading,
        "error": state.error,
        "cooling_down_for": state.cooling_down_for,
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/v1/chains")
async def chains():
    return {"chains": [_chain_view(chain) for chain in list_chains()]}


@app.get("/v1/chains/{key}")
async def chain_info(key: str):
    chain = get_chain_by_key(key)
    if chain is None:
        raise HTTPException(status_code=404, detail=f"Unknown chain '{key}'")
    return _chain_view(chain)


@app.post("/v1/transactions/fetch")
async def fetch_transactions(body: FetchRequest):
    chain = validate_chain(body.chain)
    logger.info("FETCH REQUEST: address=%s chain=%s connected=%s", body.address, chain.key, body.is_connected)
    outcome = await orchestrator.request_fetch(body.address, chain, is_connected=body.is_connected)
    return {"outcome": outcome.value, "state": _state_view(orchestrator.state())}


@app.get("/v1/transactions")
async def transactions():
    return _state_view(orchestrator.state())


@app.post("/v1/transactions/clear-error")
async def clear_error():
    orchestrator.clear_error()
    return _state_view(orchestrator.state())


@app.post("/v1/transactions/reset")
async def reset():
    orchestrator.reset()
    return _state_view(orchestrator.state())
