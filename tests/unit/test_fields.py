"""
Unit tests for field access by name and storage value selection.
"""

import pytest

from ruuvi_collector.beacon.fields import (
    FIELD_ACCESSORS,
    RAW_FIELDS,
    StorageValues,
    UnknownFieldError,
    get_field_value,
    select_fields,
)
from ruuvi_collector.beacon.measurement import EnhancedRuuviMeasurement
from tests.utils.test_helpers import make_measurement


class TestFieldAccessors:
    """Test suite for FIELD_ACCESSORS."""

    def test_every_measurement_field_is_listed(self):
        """Test that the table covers the measurement record exactly."""
        assert set(FIELD_ACCESSORS) == set(EnhancedRuuviMeasurement.__dataclass_fields__)

    def test_get_field_value(self):
        measurement = make_measurement(x=0.25, mac="AABBCCDDEEFF")

        assert get_field_value(measurement, "acceleration_x") == 0.25
        assert get_field_value(measurement, "mac") == "AABBCCDDEEFF"
        assert get_field_value(measurement, "data_format") == 5

    def test_unknown_field(self):
        with pytest.raises(UnknownFieldError):
            get_field_value(make_measurement(), "__class__")


class TestSelectFields:
    """Test suite for select_fields."""

    def setup_method(self):
        """Set up test fixtures."""
        self.measurement = make_measurement()

    def test_extended_skips_missing_values(self):
        values = select_fields(self.measurement, StorageValues.EXTENDED)

        assert values['temperature'] == 20.0
        assert 'humidity' not in values
        assert 'name' not in values

    def test_raw(self):
        values = select_fields(self.measurement, StorageValues.RAW)

        assert set(values) <= set(RAW_FIELDS)
        assert 'mac' in values
        assert 'acceleration_total' not in values

    def test_whitelist(self):
        values = select_fields(self.measurement, StorageValues.WHITELIST, ["temperature", "rssi"])

        assert values == {'rssi': -60, 'temperature': 20.0}

    def test_blacklist(self):
        values = select_fields(self.measurement, StorageValues.BLACKLIST, ["temperature"])

        assert 'temperature' not in values
        assert values['mac'] == "AABBCCDDEEFF"

    def test_unknown_name_in_list(self):
        with pytest.raises(UnknownFieldError):
            select_fields(self.measurement, StorageValues.WHITELIST, ["temprature"])
