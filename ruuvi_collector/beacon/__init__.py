"""
Ruuvi beacon decoding: payload decoder, measurement records, derived values.
"""

from .decoder import RUUVI_MANUFACTURER_ID, PayloadDecoder, RuuviPayloadDecoder
from .fields import (
    FIELD_ACCESSORS,
    StorageValues,
    UnknownFieldError,
    get_field_value,
    select_fields,
)
from .handler import BeaconHandler
from .measurement import EnhancedRuuviMeasurement, RuuviDataFormat, RuuviMeasurement

__all__ = [
    'BeaconHandler',
    'EnhancedRuuviMeasurement',
    'FIELD_ACCESSORS',
    'PayloadDecoder',
    'RUUVI_MANUFACTURER_ID',
    'RuuviDataFormat',
    'RuuviMeasurement',
    'RuuviPayloadDecoder',
    'StorageValues',
    'UnknownFieldError',
    'get_field_value',
    'select_fields',
]
