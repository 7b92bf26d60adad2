"""Input event labels: key codes, key flags, axes, LEDs and sensor types."""

from .labels import (
    KeyFlag,
    SensorType,
    get_axis_by_label,
    get_axis_label,
    get_key_code_by_label,
    get_key_code_label,
    get_key_flag_by_label,
    get_key_flag_labels,
    get_led_by_label,
    get_led_label,
    get_sensor_type_by_label,
)

__all__ = [
    "KeyFlag",
    "SensorType",
    "get_axis_by_label",
    "get_axis_label",
    "get_key_code_by_label",
    "get_key_code_label",
    "get_key_flag_by_label",
    "get_key_flag_labels",
    "get_led_by_label",
    "get_led_label",
    "get_sensor_type_by_label",
]
