"""
Adapter registry: maps each Exchange to the adapter class that serves it.

Resolution happens once, when a refresh run is set up. Tests can register a
fake adapter instance for an exchange.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Type, Union

from .base import Exchange, ExchangeAdapter
from .cex.binance import BinanceAdapter
from .cex.bybit import BybitAdapter
from .cex.mexc import MexcAdapter
from .transport import HTTP_TIMEOUT_S

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Mapping of Exchange -> adapter factory (class) or ready instance.

    Usage:
        registry = create_default_registry()
        adapter = registry.create(Exchange.BINANCE, timeout=10.0)
    """

    def __init__(self) -> None:
        self._factories: Dict[Exchange, Any] = {}

    def register(
        self,
        exchange: Exchange,
        factory: Union[Type[ExchangeAdapter], ExchangeAdapter],
    ) -> None:
        """Register an adapter class or instance for an exchange."""
        self._factories[exchange] = factory
        logger.debug("Registered adapter for %s", exchange.value)

    def create(self, exchange: Exchange, *, timeout: float = HTTP_TIMEOUT_S) -> ExchangeAdapter:
        """Instantiate (or return the registered instance of) the adapter for exchange."""
        factory = self._factories.get(exchange)
        if factory is None:
            raise KeyError(
                f"No adapter registered for {exchange.value!r}. "
                f"Available: {[e.value for e in self._factories]}"
            )
        if isinstance(factory, type):
            return factory(timeout=timeout)
        return factory

    @property
    def exchanges(self) -> list:
        return list(self._factories)


def create_default_registry() -> AdapterRegistry:
    """Create a registry with all built-in adapters."""
    registry = AdapterRegistry()
    registry.register(Exchange.BYBIT, BybitAdapter)
    registry.register(Exchange.BINANCE, BinanceAdapter)
    registry.register(Exchange.MEXC, MexcAdapter)
    return registry
