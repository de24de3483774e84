"""
MAC based filtering of incoming dump lines.
"""

from enum import Enum
from typing import Iterable, Optional

from ..utils.config import ConfigurationError


class FilterMode(Enum):
    """How the MAC filter treats its list."""
    ALL = "all"
    BLACKLIST = "blacklist"
    WHITELIST = "whitelist"
    NAMED = "named"


class MacFilter:
    """
    Decides whether frames from a MAC are processed at all.

    MACs are compared as 12 upper-case hex characters.
    """

    def __init__(self,
                 mode: FilterMode = FilterMode.ALL,
                 macs: Optional[Iterable[str]] = None,
                 named_macs: Optional[Iterable[str]] = None):
        self.mode = mode
        self.macs = frozenset(mac.upper() for mac in (macs or ()))
        self.named_macs = frozenset(mac.upper() for mac in (named_macs or ()))

        if self.mode == FilterMode.NAMED and not self.named_macs:
            raise ConfigurationError("Named filter mode requires at least one named tag")

    def is_allowed(self, mac: Optional[str]) -> bool:
        """Whether frames from this MAC should be processed."""
        if mac is None:
            return False
        mac = mac.upper()
        if self.mode == FilterMode.BLACKLIST:
            return mac not in self.macs
        if self.mode == FilterMode.WHITELIST:
            return mac in self.macs
        if self.mode == FilterMode.NAMED:
            return mac in self.named_macs
        return True

    @classmethod
    def from_config(cls, config) -> 'MacFilter':
        """
        Build the filter from a Config instance.

        Raises:
            ConfigurationError: If the filter mode is unknown
        """
        try:
            mode = FilterMode(config.filter_mode)
        except ValueError:
            raise ConfigurationError(f"Unknown RUUVI_FILTER_MODE '{config.filter_mode}'")
        return cls(mode, config.filter_macs, config.tag_names.keys())
