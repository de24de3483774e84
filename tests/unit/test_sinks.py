"""
Unit tests for measurement sinks.
"""

import pytest

from ruuvi_collector.beacon.fields import StorageValues, UnknownFieldError
from ruuvi_collector.storage.sink import LoggingSink, MeasurementSink, PersistenceError, RecordingSink
from tests.utils.test_helpers import make_measurement


class TestRecordingSink:
    """Test suite for RecordingSink."""

    def test_save(self, recording_sink):
        measurement = make_measurement()
        recording_sink.save(measurement)

        assert recording_sink.measurements == [measurement]
        assert len(recording_sink) == 1

    def test_save_after_close(self, recording_sink):
        with recording_sink:
            recording_sink.save(make_measurement())

        with pytest.raises(PersistenceError):
            recording_sink.save(make_measurement())


class TestLoggingSink:
    """Test suite for LoggingSink."""

    def test_logs_selected_fields(self, mock_logger):
        sink = LoggingSink(StorageValues.WHITELIST, ["mac", "temperature"], logger=mock_logger)

        sink.save(make_measurement(mac="AABBCCDDEEFF", temperature=21.5))

        mock_logger.info.assert_called_once()
        message = mock_logger.info.call_args[0][0]
        assert "mac=AABBCCDDEEFF" in message
        assert "temperature=21.5" in message
        assert "rssi" not in message

    def test_unknown_field_rejected_early(self):
        with pytest.raises(UnknownFieldError):
            LoggingSink(StorageValues.BLACKLIST, ["nonsense"])

    def test_base_sink_is_abstract(self):
        with pytest.raises(NotImplementedError):
            MeasurementSink().save(make_measurement())
