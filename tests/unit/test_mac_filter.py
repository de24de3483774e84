"""
Unit tests for MAC filtering.
"""

import pytest

from ruuvi_collector.collector.filters import FilterMode, MacFilter
from ruuvi_collector.utils.config import ConfigurationError


class TestMacFilter:
    """Test suite for MacFilter."""

    def test_all(self):
        mac_filter = MacFilter()

        assert mac_filter.is_allowed("AABBCCDDEEFF")
        assert not mac_filter.is_allowed(None)

    def test_blacklist(self):
        mac_filter = MacFilter(FilterMode.BLACKLIST, ["AABBCCDDEEFF"])

        assert not mac_filter.is_allowed("AABBCCDDEEFF")
        assert not mac_filter.is_allowed("aabbccddeeff")
        assert mac_filter.is_allowed("112233445566")

    def test_whitelist(self):
        mac_filter = MacFilter(FilterMode.WHITELIST, ["AABBCCDDEEFF"])

        assert mac_filter.is_allowed("AABBCCDDEEFF")
        assert not mac_filter.is_allowed("112233445566")

    def test_named(self):
        mac_filter = MacFilter(FilterMode.NAMED, named_macs=["AABBCCDDEEFF"])

        assert mac_filter.is_allowed("AABBCCDDEEFF")
        assert not mac_filter.is_allowed("112233445566")

    def test_named_without_names(self):
        with pytest.raises(ConfigurationError):
            MacFilter(FilterMode.NAMED)

    def test_from_config(self, test_config, clean_env):
        clean_env.setenv("RUUVI_FILTER_MODE", "whitelist")
        clean_env.setenv("RUUVI_FILTER_MACS", "aa:bb:cc:dd:ee:ff")

        mac_filter = MacFilter.from_config(test_config)

        assert mac_filter.mode == FilterMode.WHITELIST
        assert mac_filter.is_allowed("AABBCCDDEEFF")
        assert not mac_filter.is_allowed("112233445566")

    def test_from_config_named(self, test_config, clean_env):
        clean_env.setenv("RUUVI_FILTER_MODE", "named")
        clean_env.setenv("RUUVI_TAG_NAMES", "112233445566=Fridge")

        mac_filter = MacFilter.from_config(test_config)

        assert mac_filter.is_allowed("112233445566")
        assert not mac_filter.is_allowed("AABBCCDDEEFF")

    def test_from_config_unknown_mode(self, test_config, clean_env):
        clean_env.setenv("RUUVI_FILTER_MODE", "greylist")

        with pytest.raises(ConfigurationError):
            MacFilter.from_config(test_config)
