"""On-chain market data provider reading Aave V2 contracts via web3.py."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from lendcore.data.contracts import (
    ASSET_ADDRESSES,
    LENDING_POOL,
    LENDING_POOL_ABI,
    LENDING_RATE_ORACLE,
    LENDING_RATE_ORACLE_ABI,
    PRICE_ORACLE,
    PRICE_ORACLE_ABI,
    RATE_STRATEGY_ABI,
)
from lendcore.data.interfaces import InterestRateStrategyParams, MarketDataProvider
from lendcore.libraries.reserve_configuration import ReserveConfiguration

logger = logging.getLogger(__name__)

# Position of interestRateStrategyAddress in the getReserveData tuple
_STRATEGY_ADDRESS_FIELD = 10


class _TTLCache:
    """Dict cache whose entries expire *ttl* seconds after being stored."""

    def __init__(self, ttl: float) -> None:
        self._ttl = ttl
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (time.monotonic() + self._ttl, value)

    def clear(self) -> None:
        self._entries.clear()


class OnChainDataProvider(MarketDataProvider):
    """Live market data from the Aave V2 lending pool and its oracles.

    Parameters
    ----------
    rpc_url : str
        Ethereum JSON-RPC endpoint URL.
    cache_ttl : float
        Seconds before a cached value expires (default 60).
    fallback : MarketDataProvider | None
        Provider consulted when an RPC call fails.
    """

    def __init__(
        self,
        rpc_url: str,
        cache_ttl: float = 60.0,
        fallback: MarketDataProvider | None = None,
    ) -> None:
        from web3 import Web3

        self._w3 = Web3(Web3.HTTPProvider(rpc_url))
        self._cache = _TTLCache(cache_ttl)
        self._fallback = fallback

        self._lending_pool = self._contract(LENDING_POOL, LENDING_POOL_ABI)
        self._price_oracle = self._contract(PRICE_ORACLE, PRICE_ORACLE_ABI)
        self._lending_rate_oracle = self._contract(
            LENDING_RATE_ORACLE, LENDING_RATE_ORACLE_ABI
        )

    def _contract(self, address: str, abi: list[dict]) -> Any:
        return self._w3.eth.contract(address=self._w3.to_checksum_address(address), abi=abi)

    def _resolve_address(self, asset: str) -> str:
        raw = ASSET_ADDRESSES.get(asset)
        if raw is None:
            raise ValueError(f"Unknown asset: {asset}")
        return self._w3.to_checksum_address(raw)

    def _call_with_fallback(
        self,
        cache_key: str,
        fetcher: Callable[[], Any],
        fallback_method: Callable[..., Any] | None,
        *fallback_args: Any,
    ) -> Any:
        """Cache, then RPC, then fallback provider."""
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            value = fetcher()
        except Exception:
            logger.warning("RPC call failed for key=%s, using fallback", cache_key, exc_info=True)
        else:
            self._cache.set(cache_key, value)
            return value

        if fallback_method is not None:
            return fallback_method(*fallback_args)
        raise RuntimeError(f"RPC call failed and no fallback available for {cache_key}")

    # ------------------------------------------------------------------
    # MarketDataProvider interface
    # ------------------------------------------------------------------

    def get_strategy_params(self, asset: str) -> InterestRateStrategyParams:
        def _fetch() -> InterestRateStrategyParams:
            reserve_data = self._lending_pool.functions.getReserveData(
                self._resolve_address(asset)
            ).call()
            strategy = self._contract(reserve_data[_STRATEGY_ADDRESS_FIELD], RATE_STRATEGY_ABI)
            fn = strategy.functions
            return InterestRateStrategyParams(
                optimal_utilization_rate=fn.OPTIMAL_UTILIZATION_RATE().call(),
                base_variable_borrow_rate=fn.baseVariableBorrowRate().call(),
                variable_rate_slope1=fn.variableRateSlope1().call(),
                variable_rate_slope2=fn.variableRateSlope2().call(),
                stable_rate_slope1=fn.stableRateSlope1().call(),
                stable_rate_slope2=fn.stableRateSlope2().call(),
            )

        fb = self._fallback.get_strategy_params if self._fallback else None
        return self._call_with_fallback(f"strategy:{asset}", _fetch, fb, asset)

    def get_reserve_configuration(self, asset: str) -> ReserveConfiguration:
        def _fetch() -> int:
            (data,) = self._lending_pool.functions.getConfiguration(
                self._resolve_address(asset)
            ).call()
            return data

        fb = self._fallback.get_reserve_configuration if self._fallback else None
        # Cache the raw word; hand out a fresh mutable configuration each call
        value = self._call_with_fallback(f"configuration:{asset}", _fetch, fb, asset)
        if isinstance(value, ReserveConfiguration):
            return value
        return ReserveConfiguration(value)

    def get_asset_price(self, asset: str) -> int:
        def _fetch() -> int:
            return self._price_oracle.functions.getAssetPrice(
                self._resolve_address(asset)
            ).call()

        fb = self._fallback.get_asset_price if self._fallback else None
        return self._call_with_fallback(f"price:{asset}", _fetch, fb, asset)

    def get_market_borrow_rate(self, asset: str) -> int:
        def _fetch() -> int:
            return self._lending_rate_oracle.functions.getMarketBorrowRate(
                self._resolve_address(asset)
            ).call()

        fb = self._fallback.get_market_borrow_rate if self._fallback else None
        return self._call_with_fallback(f"market_rate:{asset}", _fetch, fb, asset)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Invalidate all cached values, forcing fresh RPC calls."""
        self._cache.clear()

    @property
    def is_connected(self) -> bool:
        try:
            return self._w3.is_connected()
        except Exception:
            return False
