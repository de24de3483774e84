"""
Measurement sinks: where accepted measurements end up.
"""

import logging
from typing import Iterable, List, Optional

from ..beacon.fields import StorageValues, select_fields, selected_field_names
from ..beacon.measurement import EnhancedRuuviMeasurement


class PersistenceError(Exception):
    """Raised by a sink when a measurement cannot be stored."""
    pass


class MeasurementSink:
    """Base class for measurement sinks."""

    def save(self, measurement: EnhancedRuuviMeasurement):
        """
        Store one accepted measurement.

        Raises:
            PersistenceError: If the measurement could not be stored
        """
        raise NotImplementedError

    def close(self):
        """Release resources held by the sink."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class LoggingSink(MeasurementSink):
    """
    Writes the selected fields of every measurement to the ``ruuvi.storage``
    logger at INFO level.
    """

    def __init__(self,
                 storage_values: StorageValues = StorageValues.EXTENDED,
                 field_names: Optional[Iterable[str]] = None,
                 logger=None):
        self.logger = logger or logging.getLogger('ruuvi.storage')
        self.storage_values = storage_values
        self.field_names = list(field_names or [])
        # Fails early on unknown field names
        selected_field_names(self.storage_values, self.field_names)

    def save(self, measurement: EnhancedRuuviMeasurement):
        values = select_fields(measurement, self.storage_values, self.field_names)
        formatted = " ".join(f"{name}={value}" for name, value in values.items())
        self.logger.info(f"MEASUREMENT {formatted}")


class RecordingSink(MeasurementSink):
    """Keeps saved measurements in memory."""

    def __init__(self):
        self.measurements: List[EnhancedRuuviMeasurement] = []
        self.closed = False

    def save(self, measurement: EnhancedRuuviMeasurement):
        if self.closed:
            raise PersistenceError("Sink is closed")
        self.measurements.append(measurement)

    def close(self):
        self.closed = True

    def __len__(self) -> int:
        return len(self.measurements)
