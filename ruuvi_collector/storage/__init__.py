"""
Measurement sinks.
"""

from .sink import LoggingSink, MeasurementSink, PersistenceError, RecordingSink

__all__ = ['LoggingSink', 'MeasurementSink', 'PersistenceError', 'RecordingSink']
