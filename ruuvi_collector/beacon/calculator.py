"""
Values derived from the raw sensor readings of a Ruuvi tag.

Humidity related values use the Magnus formula with the constants
611.2 Pa, 17.67 and 243.5 degC.
"""

import math
from typing import Dict, Optional


def total_acceleration(x: Optional[float], y: Optional[float], z: Optional[float]) -> Optional[float]:
    """Length of the acceleration vector in g."""
    if x is None or y is None or z is None:
        return None
    return math.sqrt(x * x + y * y + z * z)


def angle_between_vector_component_and_axis(component: Optional[float], length: Optional[float]) -> Optional[float]:
    """Angle in degrees between the acceleration vector and one axis."""
    if component is None or length is None or length == 0:
        return None
    # Rounding can push the ratio a hair outside [-1, 1]
    ratio = max(-1.0, min(1.0, component / length))
    return math.degrees(math.acos(ratio))


def equilibrium_vapor_pressure(temperature: Optional[float]) -> Optional[float]:
    """Saturation vapour pressure of water in Pa."""
    if temperature is None:
        return None
    return 611.2 * math.exp(17.67 * temperature / (243.5 + temperature))


def absolute_humidity(temperature: Optional[float], relative_humidity: Optional[float]) -> Optional[float]:
    """Absolute humidity in g/m^3."""
    if temperature is None or relative_humidity is None:
        return None
    return equilibrium_vapor_pressure(temperature) * relative_humidity * 0.021674 / (273.15 + temperature)


def dew_point(temperature: Optional[float], relative_humidity: Optional[float]) -> Optional[float]:
    """Dew point in Celsius; None when humidity is zero (no dew point exists)."""
    if temperature is None or relative_humidity is None or relative_humidity <= 0:
        return None
    v = math.log(relative_humidity / 100 * equilibrium_vapor_pressure(temperature) / 611.2)
    return -243.5 * v / (v - 17.67)


def air_density(temperature: Optional[float],
                relative_humidity: Optional[float],
                pressure: Optional[float]) -> Optional[float]:
    """
    Density of humid air in kg/m^3.

    Args:
        temperature: Celsius
        relative_humidity: %RH
        pressure: hPa
    """
    if temperature is None or relative_humidity is None or pressure is None:
        return None
    pressure_pa = pressure * 100
    return (1.2929 * 273.15 / (temperature + 273.15)
            * (pressure_pa - 0.3783 * relative_humidity / 100 * equilibrium_vapor_pressure(temperature))
            / 101300)


def calculate_all_values(measurement) -> Dict[str, Optional[float]]:
    """
    Compute every derived value for a measurement.

    Returns:
        Dict of derived field name to value (None where inputs are missing)
    """
    total = total_acceleration(measurement.acceleration_x, measurement.acceleration_y, measurement.acceleration_z)
    return {
        'acceleration_total': total,
        'acceleration_angle_from_x': angle_between_vector_component_and_axis(measurement.acceleration_x, total),
        'acceleration_angle_from_y': angle_between_vector_component_and_axis(measurement.acceleration_y, total),
        'acceleration_angle_from_z': angle_between_vector_component_and_axis(measurement.acceleration_z, total),
        'equilibrium_vapor_pressure': equilibrium_vapor_pressure(measurement.temperature),
        'absolute_humidity': absolute_humidity(measurement.temperature, measurement.humidity),
        'dew_point': dew_point(measurement.temperature, measurement.humidity),
        'air_density': air_density(measurement.temperature, measurement.humidity, measurement.pressure),
    }
