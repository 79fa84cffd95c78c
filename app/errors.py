"""
Failure taxonomy for transaction fetching.

Every failure the transfer fetcher can raise derives from FetchError so the
orchestrator can classify it with a single except clause. Price lookups never
raise; they degrade to a fallback price instead.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for transaction fetch failures."""


class InvalidAddress(FetchError):
    pass


class MissingCredential(FetchError):
    pass


class UnsupportedChain(FetchError):
    pass


class RateLimited(FetchError):
    pass


class CorsOrConfig(FetchError):
    """Upstream rejected the request because of credentials or origin policy."""


class NetworkError(FetchError):
    pass


class UpstreamError(FetchError):
    """Well-formed upstream error that no other class covers."""


RATE_LIMIT_MESSAGE = (
    "Rate limit exceeded. Please wait a few minutes and try again. "
    "The free Alchemy tier has rate limits."
)
CONFIG_MESSAGE = (
    "Configuration error: please check that your Alchemy API key is set correctly in the .env file."
)
NETWORK_MESSAGE = "Network error. Please check your connection and API key configuration."
GENERIC_MESSAGE = "Failed to fetch transactions. Please try again later."


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, RateLimited):
        return RATE_LIMIT_MESSAGE
    if isinstance(exc, (CorsOrConfig, MissingCredential)):
        return CONFIG_MESSAGE
    if isinstance(exc, NetworkError):
        return NETWORK_MESSAGE
    return str(exc) or GENERIC_MESSAGE
