"""Selection of the market data source for the dashboard and scripts."""

from __future__ import annotations

import logging
import os

from lendcore.data.interfaces import MarketDataProvider
from lendcore.data.static_params import StaticDataProvider

logger = logging.getLogger(__name__)

RPC_URL_ENV = "ETH_RPC_URL"


def resolve_rpc_url(rpc_url: str | None = None) -> str | None:
    """Explicit URL first, then ``$ETH_RPC_URL``; empty strings count as unset."""
    return rpc_url or os.environ.get(RPC_URL_ENV) or None


def create_provider(
    use_onchain: bool = False,
    rpc_url: str | None = None,
    cache_ttl: float = 60.0,
) -> MarketDataProvider:
    """Return live Aave V2 market data when asked for and possible.

    The on-chain provider always gets a ``StaticDataProvider`` as fallback, so
    individual failed reads degrade to reference values. If no endpoint is
    configured, or the provider cannot be constructed, the static provider is
    returned directly.

    Args:
        use_onchain: Try to read from chain.
        rpc_url: JSON-RPC endpoint; see ``resolve_rpc_url``.
        cache_ttl: Seconds each on-chain read stays cached.
    """
    static = StaticDataProvider()
    if not use_onchain:
        return static

    endpoint = resolve_rpc_url(rpc_url)
    if endpoint is None:
        logger.warning("No RPC endpoint configured (set %s); using static data", RPC_URL_ENV)
        return static

    from lendcore.data.onchain_provider import OnChainDataProvider

    try:
        return OnChainDataProvider(rpc_url=endpoint, cache_ttl=cache_ttl, fallback=static)
    except Exception:
        logger.warning("Could not connect to %s; using static data", endpoint, exc_info=True)
        return static
