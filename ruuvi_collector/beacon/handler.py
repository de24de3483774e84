"""
Turns decoded HCI frames into enhanced Ruuvi measurements.
"""

import logging
from typing import Callable, Optional

from ..hci.parser import AdvertisementData, HCIFrame
from .decoder import RUUVI_MANUFACTURER_ID, PayloadDecoder, RuuviPayloadDecoder
from .measurement import EnhancedRuuviMeasurement


AD_TYPE_MANUFACTURER_DATA = 0xFF
AD_TYPE_SERVICE_DATA = 0x16     # Eddystone URL
AD_TYPE_EDDYSTONE_TLM = 0x17

# Looked up in this order, first match wins
AD_TYPE_PRIORITY = (AD_TYPE_MANUFACTURER_DATA, AD_TYPE_SERVICE_DATA, AD_TYPE_EDDYSTONE_TLM)

# 0x0499 little-endian
RUUVI_SIGNATURE = bytes([0x99, 0x04])


class BeaconHandler:
    """
    Selects the Ruuvi payload of a frame and builds an EnhancedRuuviMeasurement.

    The handler is stateless: the same frame always produces an equal result.
    """

    def __init__(self,
                 decoder: Optional[PayloadDecoder] = None,
                 name_lookup: Optional[Callable[[str], Optional[str]]] = None,
                 receiver: Optional[str] = None,
                 logger=None):
        """
        Initialize the handler.

        Args:
            decoder: Payload decoder collaborator (defaults to RuuviPayloadDecoder)
            name_lookup: Maps a MAC to a friendly name, or None if unnamed
            receiver: Receiver tag stamped on every measurement
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger('ruuvi.beacon')
        self.decoder = decoder or RuuviPayloadDecoder()
        self.name_lookup = name_lookup or (lambda mac: None)
        self.receiver = receiver or None

    def find_payload(self, frame: HCIFrame) -> Optional[AdvertisementData]:
        """Return the AD structure carrying the vendor payload, if any."""
        for ad_type in AD_TYPE_PRIORITY:
            advertisement = frame.find_advertisement_data(ad_type)
            if advertisement is not None:
                return advertisement
        return None

    def handle(self, frame: HCIFrame) -> Optional[EnhancedRuuviMeasurement]:
        """
        Handle a decoded frame.

        Args:
            frame: Frame produced by HCIParser

        Returns:
            Optional[EnhancedRuuviMeasurement]: The measurement, or None when the
            frame does not carry a supported Ruuvi payload
        """
        advertisement = self.find_payload(frame)
        if advertisement is None:
            return None

        if advertisement.data[:2] != RUUVI_SIGNATURE:
            return None

        try:
            measurement = self.decoder(RUUVI_MANUFACTURER_ID, advertisement.data)
        except Exception as e:
            self.logger.debug(f"Payload decoder failed for {frame.mac}: {e}")
            return None

        if measurement is None:
            return None

        return EnhancedRuuviMeasurement.from_measurement(
            measurement,
            mac=frame.mac,
            rssi=frame.rssi,
            name=self.name_lookup(frame.mac),
            receiver=self.receiver
        )
