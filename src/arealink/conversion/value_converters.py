"""Conversions from raw hub values to the values stored on the domain model.

Rounding follows the hub frontend: halves are rounded up (towards positive infinity), not to the
nearest even number as the built-in `round` does.
"""

import math
from typing import Any

from arealink.const import (
    CELSIUS,
    FAHRENHEIT,
    MAX_BRIGHTNESS,
    TEMPERATURE_UNITS,
    UNAVAILABLE,
    LightStateValue,
    SensorStateValue,
    TemperatureUnit,
)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def get_light_state(state: Any) -> LightStateValue:
    """Normalize a raw light state, anything other than 'on' or 'off' is unavailable."""
    match state:
        case "on":
            return "on"
        case "off":
            return "off"
        case _:
            return UNAVAILABLE


def _parse_leading_int(value: str) -> int | None:
    value = value.strip()
    end = 1 if value[:1] in ("+", "-") else 0
    while end < len(value) and value[end].isdigit():
        end += 1
    digits = value[:end]
    if not digits or digits in ("+", "-"):
        return None
    return int(digits)


def get_brightness_percentage(brightness: Any) -> int | None:
    """Convert a raw 0..255 brightness into a 0..100 percentage.

    Args:
        brightness: The raw brightness attribute, either a number or a numeric string.

    Returns:
        The rounded percentage, or None if the value is missing or not numeric.
    """
    if isinstance(brightness, str):
        value = _parse_leading_int(brightness)
        if value is None:
            return None
    elif _is_number(brightness):
        if isinstance(brightness, float) and not math.isfinite(brightness):
            return None
        value = brightness
    else:
        return None
    return round_half_up(value / MAX_BRIGHTNESS * 100)


def get_brightness_value(brightness_percentage: int | float | None) -> int:
    """Convert a 0..100 percentage into the hub's 0..255 brightness scale, None maps to 0."""
    if brightness_percentage is None:
        return 0
    return round_half_up(brightness_percentage / 100 * MAX_BRIGHTNESS)


def get_rgb_color(rgb_color: Any) -> tuple[int, int, int] | None:
    if not rgb_color or not isinstance(rgb_color, list | tuple):
        return None
    return tuple(rgb_color)  # pyright: ignore[reportReturnType]


def get_numeric_sensor_state(state: Any) -> SensorStateValue:
    """Coerce a raw sensor state into a number, or the unavailable sentinel."""
    if _is_number(state):
        return state if math.isfinite(state) else UNAVAILABLE
    if isinstance(state, str):
        try:
            value = float(state)
        except ValueError:
            return UNAVAILABLE
        return value if math.isfinite(value) else UNAVAILABLE
    return UNAVAILABLE


def get_temperature_unit_of_measurement(unit_of_measurement: Any) -> TemperatureUnit | None:
    if unit_of_measurement in TEMPERATURE_UNITS:
        return unit_of_measurement
    return None


def calc_temperature_value(
    value: SensorStateValue,
    unit_of_measurement: TemperatureUnit,
    target_unit_of_measurement: TemperatureUnit,
) -> SensorStateValue:
    """Convert a temperature reading into the target unit.

    Args:
        value: The reading, or the unavailable sentinel.
        unit_of_measurement: The unit the reading was reported in.
        target_unit_of_measurement: The unit to display the reading in.

    Returns:
        The converted and rounded reading. Readings already in the target unit and the
        unavailable sentinel are returned unchanged.
    """
    if value == UNAVAILABLE or unit_of_measurement == target_unit_of_measurement:
        return value
    if target_unit_of_measurement == FAHRENHEIT:
        converted = value * 1.8 + 32  # pyright: ignore[reportOperatorIssue]
    elif target_unit_of_measurement == CELSIUS:
        converted = (value - 32) / 1.8  # pyright: ignore[reportOperatorIssue]
    else:
        raise ValueError(f"Unknown temperature unit: {target_unit_of_measurement}")
    return round_half_up(converted)
