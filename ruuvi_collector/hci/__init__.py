"""
HCI dump decoding: frames, advertising reports and AD structures.
"""

from .parser import (
    AdvertisementData,
    HCIDumpAssembler,
    HCIFrame,
    HCIParser,
    Report,
    get_mac_from_line,
    has_mac_address,
)

__all__ = [
    'AdvertisementData',
    'HCIDumpAssembler',
    'HCIFrame',
    'HCIParser',
    'Report',
    'get_mac_from_line',
    'has_mac_address',
]
