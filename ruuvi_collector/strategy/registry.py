"""
Per-tag limiting strategy registry.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional

from .limiting import Clock, LimitingStrategy, StrategyKind, StrategySettings


StrategyFactory = Callable[[str], LimitingStrategy]


class StrategyRegistry:
    """
    Holds one limiting strategy per MAC.

    A strategy is created through the factory the first time its MAC is seen
    and kept for the lifetime of the registry.
    """

    def __init__(self, factory: StrategyFactory, logger=None):
        """
        Initialize the registry.

        Args:
            factory: Creates the strategy for a MAC seen for the first time
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger('ruuvi.strategy')
        self._factory = factory
        self._strategies: Dict[str, LimitingStrategy] = {}
        self._lock = threading.Lock()

    def get(self, mac: str) -> LimitingStrategy:
        """Return the strategy of a MAC, creating it on first use."""
        strategy = self._strategies.get(mac)
        if strategy is not None:
            return strategy

        with self._lock:
            strategy = self._strategies.get(mac)
            if strategy is None:
                strategy = self._factory(mac)
                self._strategies[mac] = strategy
                self.logger.debug(f"Created {type(strategy).__name__} for {mac}")
            return strategy

    def devices(self) -> List[str]:
        """MACs that currently have a strategy."""
        with self._lock:
            return list(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, mac) -> bool:
        return mac in self._strategies

    @classmethod
    def from_settings(cls,
                      settings: StrategySettings,
                      overrides: Optional[Dict[str, StrategyKind]] = None,
                      clock: Optional[Clock] = None,
                      logger=None) -> 'StrategyRegistry':
        """
        Build a registry creating strategies from settings.

        Args:
            settings: Default strategy settings
            overrides: Strategy kind per MAC, replacing the default kind
            clock: Clock handed to every strategy
            logger: Logger instance
        """
        per_mac = {
            mac: settings.model_copy(update={'kind': kind})
            for mac, kind in (overrides or {}).items()
        }

        def factory(mac: str) -> LimitingStrategy:
            return per_mac.get(mac, settings).create(clock)

        return cls(factory, logger=logger)

    @classmethod
    def from_config(cls, config, clock: Optional[Clock] = None, logger=None) -> 'StrategyRegistry':
        """
        Build a registry from a Config instance, including per-tag overrides.

        Raises:
            ConfigurationError: If strategy settings are invalid
        """
        settings = StrategySettings.from_config(config)
        overrides = {
            mac: StrategySettings.from_config(config, kind=kind).kind
            for mac, kind in config.tag_strategies.items()
        }
        return cls.from_settings(settings, overrides, clock=clock, logger=logger)
