"""
Name based access to measurement fields.

Every field a sink may store is listed once in FIELD_ACCESSORS together with
the function extracting it. Selection by name never falls back to attribute
lookup, so only listed fields can be read.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from .measurement import EnhancedRuuviMeasurement


class UnknownFieldError(KeyError):
    """Raised when a field name is not in FIELD_ACCESSORS."""
    pass


class StorageValues(Enum):
    """Which measurement fields are handed to the sink."""
    RAW = "raw"
    EXTENDED = "extended"
    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"


FieldAccessor = Callable[[EnhancedRuuviMeasurement], Any]

FIELD_ACCESSORS: Dict[str, FieldAccessor] = {
    'mac': lambda m: m.mac,
    'rssi': lambda m: m.rssi,
    'name': lambda m: m.name,
    'receiver': lambda m: m.receiver,
    'data_format': lambda m: m.data_format.value if m.data_format is not None else None,
    'timestamp': lambda m: m.timestamp,
    'temperature': lambda m: m.temperature,
    'humidity': lambda m: m.humidity,
    'pressure': lambda m: m.pressure,
    'acceleration_x': lambda m: m.acceleration_x,
    'acceleration_y': lambda m: m.acceleration_y,
    'acceleration_z': lambda m: m.acceleration_z,
    'battery_voltage': lambda m: m.battery_voltage,
    'tx_power': lambda m: m.tx_power,
    'movement_counter': lambda m: m.movement_counter,
    'measurement_sequence': lambda m: m.measurement_sequence,
    'acceleration_total': lambda m: m.acceleration_total,
    'acceleration_angle_from_x': lambda m: m.acceleration_angle_from_x,
    'acceleration_angle_from_y': lambda m: m.acceleration_angle_from_y,
    'acceleration_angle_from_z': lambda m: m.acceleration_angle_from_z,
    'absolute_humidity': lambda m: m.absolute_humidity,
    'dew_point': lambda m: m.dew_point,
    'equilibrium_vapor_pressure': lambda m: m.equilibrium_vapor_pressure,
    'air_density': lambda m: m.air_density,
}

# Values sent by the tag itself plus the identity of the frame
RAW_FIELDS = (
    'mac', 'rssi', 'name', 'receiver', 'data_format', 'timestamp',
    'temperature', 'humidity', 'pressure',
    'acceleration_x', 'acceleration_y', 'acceleration_z',
    'battery_voltage', 'tx_power', 'movement_counter', 'measurement_sequence',
)

EXTENDED_FIELDS = tuple(FIELD_ACCESSORS)


def get_field_value(measurement: EnhancedRuuviMeasurement, field_name: str) -> Any:
    """
    Read one field of a measurement by name.

    Raises:
        UnknownFieldError: If the name is not a known field
    """
    try:
        accessor = FIELD_ACCESSORS[field_name]
    except KeyError:
        raise UnknownFieldError(field_name)
    return accessor(measurement)


def validate_field_names(field_names: Iterable[str]):
    """Raise UnknownFieldError for the first name that is not a known field."""
    for field_name in field_names:
        if field_name not in FIELD_ACCESSORS:
            raise UnknownFieldError(field_name)


def selected_field_names(mode: StorageValues, field_names: Optional[Iterable[str]] = None) -> tuple:
    """
    Resolve the ordered field names a storage mode selects.

    Args:
        mode: Storage values mode
        field_names: Names used by WHITELIST and BLACKLIST

    Returns:
        Tuple of field names in FIELD_ACCESSORS order
    """
    names = set(field_names or ())
    validate_field_names(names)

    if mode == StorageValues.RAW:
        return RAW_FIELDS
    if mode == StorageValues.EXTENDED:
        return EXTENDED_FIELDS
    if mode == StorageValues.WHITELIST:
        return tuple(name for name in EXTENDED_FIELDS if name in names)
    if mode == StorageValues.BLACKLIST:
        return tuple(name for name in EXTENDED_FIELDS if name not in names)
    raise ValueError(f"Unsupported storage values mode: {mode}")


def select_fields(measurement: EnhancedRuuviMeasurement,
                  mode: StorageValues = StorageValues.EXTENDED,
                  field_names: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Extract the fields selected by a storage mode.

    Fields whose value is None are left out.

    Returns:
        Dict of field name to value
    """
    selected = {}
    for name in selected_field_names(mode, field_names):
        value = FIELD_ACCESSORS[name](measurement)
        if value is not None:
            selected[name] = value
    return selected
