"""
Default payload decoder for Ruuvi manufacturer specific data.

Supports data format 3 (RAWv1) and data format 5 (RAWv2). The payload handed
in is the complete AD payload, i.e. it still starts with the two byte
manufacturer identifier.
"""

import logging
import struct
from datetime import datetime, timezone
from typing import Callable, Optional

from .measurement import RuuviDataFormat, RuuviMeasurement


RUUVI_MANUFACTURER_ID = 0x0499

PayloadDecoder = Callable[[int, bytes], Optional[RuuviMeasurement]]


class RuuviPayloadDecoder:
    """
    Decodes Ruuvi data formats 3 and 5.

    Unknown formats, foreign manufacturers and truncated payloads decode to
    None. Fields carrying the format's "not available" marker decode to None.
    """

    FORMAT_3_LENGTH = 14
    FORMAT_5_LENGTH = 24

    def __init__(self, logger=None, clock: Callable[[], datetime] = None):
        self.logger = logger or logging.getLogger('ruuvi.beacon')
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def __call__(self, manufacturer_id: int, payload: bytes) -> Optional[RuuviMeasurement]:
        return self.decode(manufacturer_id, payload)

    def decode(self, manufacturer_id: int, payload: bytes) -> Optional[RuuviMeasurement]:
        """
        Decode a manufacturer data payload.

        Args:
            manufacturer_id: Company identifier the payload was announced with
            payload: AD payload including the two identifier bytes

        Returns:
            Optional[RuuviMeasurement]: Decoded values, or None if not understood
        """
        if manufacturer_id != RUUVI_MANUFACTURER_ID:
            return None

        data = bytes(payload[2:])
        if len(data) < 1:
            return None

        data_format = data[0]

        if data_format == 3:
            return self._parse_format_3(data)
        elif data_format == 5:
            return self._parse_format_5(data)
        else:
            self.logger.debug(f"Unknown Ruuvi data format: {data_format}")
            return None

    def _parse_format_3(self, data: bytes) -> Optional[RuuviMeasurement]:
        """
        Parse Ruuvi data format 3.

        Args:
            data: Manufacturer data without the identifier

        Returns:
            Optional[RuuviMeasurement]: Parsed sensor data
        """
        if len(data) < self.FORMAT_3_LENGTH:
            return None

        # Format 3: humidity (1 byte), temperature (sign bit + 7 bit integer),
        # temperature fraction (1 byte), pressure (2 bytes),
        # acceleration X,Y,Z (2 bytes each), battery voltage (2 bytes)

        humidity = data[1] / 2.0  # 0.5% resolution
        temperature = (data[2] & 0x7F) + data[3] / 100.0
        if data[2] & 0x80:
            temperature = -temperature

        pressure = struct.unpack('>H', data[4:6])[0] + 50000  # Pa, add offset
        pressure = pressure / 100.0  # Convert to hPa

        acc_x, acc_y, acc_z = struct.unpack('>hhh', data[6:12])

        battery_voltage = struct.unpack('>H', data[12:14])[0] / 1000.0  # mV to V

        return RuuviMeasurement(
            data_format=RuuviDataFormat.FORMAT_3,
            timestamp=self.clock(),
            temperature=temperature,
            humidity=humidity,
            pressure=pressure,
            acceleration_x=acc_x / 1000.0,  # mg to g
            acceleration_y=acc_y / 1000.0,
            acceleration_z=acc_z / 1000.0,
            battery_voltage=battery_voltage
        )

    def _parse_format_5(self, data: bytes) -> Optional[RuuviMeasurement]:
        """
        Parse Ruuvi data format 5.

        Args:
            data: Manufacturer data without the identifier

        Returns:
            Optional[RuuviMeasurement]: Parsed sensor data
        """
        if len(data) < self.FORMAT_5_LENGTH:
            return None

        # Format 5: temperature (2 bytes), humidity (2 bytes), pressure (2 bytes),
        # acceleration X,Y,Z (2 bytes each), power info (2 bytes),
        # movement counter (1 byte), measurement sequence (2 bytes), MAC (6 bytes)
        (temperature, humidity, pressure, acc_x, acc_y, acc_z,
         power_info, movement_counter, measurement_sequence) = struct.unpack('>hHHhhhHBH', data[1:18])

        # Power info: 11 bits battery voltage + 5 bits TX power
        battery = power_info >> 5
        tx_power = power_info & 0x1F

        return RuuviMeasurement(
            data_format=RuuviDataFormat.FORMAT_5,
            timestamp=self.clock(),
            temperature=None if temperature == -32768 else temperature * 0.005,  # 0.005°C resolution
            humidity=None if humidity == 0xFFFF else humidity * 0.0025,  # 0.0025%RH resolution
            pressure=None if pressure == 0xFFFF else (pressure + 50000) / 100.0,  # hPa
            acceleration_x=None if acc_x == -32768 else acc_x / 1000.0,  # mg to g
            acceleration_y=None if acc_y == -32768 else acc_y / 1000.0,
            acceleration_z=None if acc_z == -32768 else acc_z / 1000.0,
            battery_voltage=None if battery == 0x7FF else (battery + 1600) / 1000.0,  # mV to V
            tx_power=None if tx_power == 0x1F else tx_power * 2 - 40,  # dBm
            movement_counter=None if movement_counter == 0xFF else movement_counter,
            measurement_sequence=None if measurement_sequence == 0xFFFF else measurement_sequence
        )
