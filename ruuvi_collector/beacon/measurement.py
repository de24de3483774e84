"""
Measurement records produced from Ruuvi advertisements.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from .calculator import calculate_all_values


class RuuviDataFormat(Enum):
    """Ruuvi data format versions."""
    FORMAT_3 = 3
    FORMAT_5 = 5


@dataclass(frozen=True)
class RuuviMeasurement:
    """Sensor values decoded from a Ruuvi manufacturer data payload."""
    data_format: RuuviDataFormat
    timestamp: Optional[datetime] = None
    temperature: Optional[float] = None  # Celsius
    humidity: Optional[float] = None     # %RH
    pressure: Optional[float] = None     # hPa
    acceleration_x: Optional[float] = None  # g
    acceleration_y: Optional[float] = None  # g
    acceleration_z: Optional[float] = None  # g
    battery_voltage: Optional[float] = None  # V
    tx_power: Optional[int] = None       # dBm
    movement_counter: Optional[int] = None
    measurement_sequence: Optional[int] = None


@dataclass(frozen=True)
class EnhancedRuuviMeasurement:
    """
    A decoded measurement together with the frame it came from and values
    derived from it. Built once per accepted frame and never modified.
    """
    mac: str
    rssi: int
    data_format: RuuviDataFormat
    name: Optional[str] = None
    receiver: Optional[str] = None
    timestamp: Optional[datetime] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    acceleration_x: Optional[float] = None
    acceleration_y: Optional[float] = None
    acceleration_z: Optional[float] = None
    battery_voltage: Optional[float] = None
    tx_power: Optional[int] = None
    movement_counter: Optional[int] = None
    measurement_sequence: Optional[int] = None
    acceleration_total: Optional[float] = None   # g
    acceleration_angle_from_x: Optional[float] = None  # degrees
    acceleration_angle_from_y: Optional[float] = None
    acceleration_angle_from_z: Optional[float] = None
    absolute_humidity: Optional[float] = None  # g/m^3
    dew_point: Optional[float] = None  # Celsius
    equilibrium_vapor_pressure: Optional[float] = None  # Pa
    air_density: Optional[float] = None  # kg/m^3

    @classmethod
    def from_measurement(cls,
                         measurement: RuuviMeasurement,
                         mac: str,
                         rssi: int,
                         name: Optional[str] = None,
                         receiver: Optional[str] = None) -> 'EnhancedRuuviMeasurement':
        """
        Build an enhanced measurement from decoded sensor values.

        Args:
            measurement: Values returned by the payload decoder
            mac: Advertiser MAC of the frame
            rssi: RSSI of the frame
            name: Friendly name of the tag, if configured
            receiver: Receiver tag, if configured

        Returns:
            EnhancedRuuviMeasurement with derived values filled in
        """
        values = {f.name: getattr(measurement, f.name) for f in fields(RuuviMeasurement)}
        base = cls(mac=mac, rssi=rssi, name=name, receiver=receiver, **values)
        return replace(base, **calculate_all_values(base))
