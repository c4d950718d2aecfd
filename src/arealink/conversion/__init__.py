from .value_converters import (
    calc_temperature_value,
    get_brightness_percentage,
    get_brightness_value,
    get_light_state,
    get_numeric_sensor_state,
    get_rgb_color,
    get_temperature_unit_of_measurement,
    round_half_up,
)

__all__ = [
    "calc_temperature_value",
    "get_brightness_percentage",
    "get_brightness_value",
    "get_light_state",
    "get_numeric_sensor_state",
    "get_rgb_color",
    "get_temperature_unit_of_measurement",
    "round_half_up",
]
