"""
Unit tests for derived value calculations.
"""

import math

import pytest

from ruuvi_collector.beacon import calculator
from ruuvi_collector.beacon.measurement import EnhancedRuuviMeasurement, RuuviDataFormat, RuuviMeasurement


class TestCalculator:
    """Test suite for the derived value functions."""

    def test_total_acceleration(self):
        assert calculator.total_acceleration(3.0, 4.0, 0.0) == pytest.approx(5.0)
        assert calculator.total_acceleration(None, 1.0, 1.0) is None

    def test_angles(self):
        """Test axis angles for a tag lying flat."""
        total = calculator.total_acceleration(0.0, 0.0, 1.0)

        assert calculator.angle_between_vector_component_and_axis(0.0, total) == pytest.approx(90.0)
        assert calculator.angle_between_vector_component_and_axis(1.0, total) == pytest.approx(0.0)
        assert calculator.angle_between_vector_component_and_axis(-1.0, total) == pytest.approx(180.0)
        assert calculator.angle_between_vector_component_and_axis(1.0, 0.0) is None

    def test_equilibrium_vapor_pressure(self):
        """Test the Magnus formula at 0 and 20 degrees."""
        assert calculator.equilibrium_vapor_pressure(0.0) == pytest.approx(611.2)
        assert calculator.equilibrium_vapor_pressure(20.0) == pytest.approx(2338.0, rel=0.01)

    def test_absolute_humidity(self):
        """Test absolute humidity at 20 degrees and 50 %RH (about 8.6 g/m3)."""
        assert calculator.absolute_humidity(20.0, 50.0) == pytest.approx(8.65, rel=0.02)

    def test_dew_point(self):
        """Test dew point at saturation equals the temperature."""
        assert calculator.dew_point(15.0, 100.0) == pytest.approx(15.0)
        assert calculator.dew_point(20.0, 50.0) == pytest.approx(9.3, abs=0.2)
        assert calculator.dew_point(20.0, 0.0) is None

    def test_air_density(self):
        """Test dry air density at 0 degrees and 1013 hPa."""
        assert calculator.air_density(0.0, 0.0, 1013.0) == pytest.approx(1.2929, rel=0.001)
        assert calculator.air_density(20.0, 50.0, None) is None

    def test_calculate_all_values_missing_inputs(self):
        """Test that missing inputs give None instead of raising."""
        values = calculator.calculate_all_values(RuuviMeasurement(data_format=RuuviDataFormat.FORMAT_5))

        assert set(values) == {
            'acceleration_total', 'acceleration_angle_from_x', 'acceleration_angle_from_y',
            'acceleration_angle_from_z', 'equilibrium_vapor_pressure', 'absolute_humidity',
            'dew_point', 'air_density',
        }
        assert all(value is None for value in values.values())

    def test_from_measurement_applies_derived_values(self):
        """Test that EnhancedRuuviMeasurement.from_measurement fills derived fields."""
        base = RuuviMeasurement(data_format=RuuviDataFormat.FORMAT_5, temperature=20.0, humidity=50.0,
                                pressure=1000.0, acceleration_x=0.0, acceleration_y=0.0, acceleration_z=1.0)

        enhanced = EnhancedRuuviMeasurement.from_measurement(base, mac="AABBCCDDEEFF", rssi=-40, name="Kitchen")

        assert enhanced.mac == "AABBCCDDEEFF"
        assert enhanced.name == "Kitchen"
        assert enhanced.temperature == 20.0
        assert enhanced.acceleration_total == pytest.approx(1.0)
        assert enhanced.acceleration_angle_from_z == pytest.approx(0.0)
        assert math.isclose(enhanced.dew_point, calculator.dew_point(20.0, 50.0))
