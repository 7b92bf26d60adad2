"""Key layout map data model and lookups."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from crates.input_labels import KeyFlag, SensorType

logger = logging.getLogger(__name__ + ".mapping")


class AxisMode(Enum):
    """How a raw axis reading is transformed."""
    NORMAL = 0
    INVERT = 1
    SPLIT = 2


@dataclass(frozen=True)
class KeyEntry:
    """Logical key a raw code maps to."""
    key_code: int
    flags: KeyFlag = KeyFlag.NONE


@dataclass(frozen=True)
class AxisInfo:
    """Axis transform for a raw abs scan code."""
    mode: AxisMode = AxisMode.NORMAL
    axis: int = -1
    # SPLIT only
    high_axis: int = -1
    split_value: int = 0
    # -1 means keep the device's own flat value
    flat_override: int = -1


@dataclass(frozen=True)
class LedEntry:
    """Logical LED a raw code maps to."""
    led_code: int


@dataclass(frozen=True)
class SensorEntry:
    """Sensor type and X/Y/Z channel a raw abs code feeds."""
    sensor_type: SensorType
    data_index: int


@dataclass
class LayoutTables:
    """Mutable tables filled in by a single parse pass."""
    keys_by_scan_code: dict[int, KeyEntry] = field(default_factory=dict)
    keys_by_usage_code: dict[int, KeyEntry] = field(default_factory=dict)
    axes: dict[int, AxisInfo] = field(default_factory=dict)
    leds_by_scan_code: dict[int, LedEntry] = field(default_factory=dict)
    leds_by_usage_code: dict[int, LedEntry] = field(default_factory=dict)
    sensors_by_abs_code: dict[int, SensorEntry] = field(default_factory=dict)
    required_kernel_configs: set[str] = field(default_factory=set)

    def freeze(self, load_filename: str = "") -> "KeyLayoutMap":
        """Build the read-only map from these tables."""
        return KeyLayoutMap(
            keys_by_scan_code=MappingProxyType(dict(self.keys_by_scan_code)),
            keys_by_usage_code=MappingProxyType(dict(self.keys_by_usage_code)),
            axes=MappingProxyType(dict(self.axes)),
            leds_by_scan_code=MappingProxyType(dict(self.leds_by_scan_code)),
            leds_by_usage_code=MappingProxyType(dict(self.leds_by_usage_code)),
            sensors_by_abs_code=MappingProxyType(dict(self.sensors_by_abs_code)),
            required_kernel_configs=frozenset(self.required_kernel_configs),
            load_filename=load_filename,
        )


@dataclass(frozen=True, eq=False)
class KeyLayoutMap:
    """Parsed key layout map.

    Read-only once loaded, so one instance can be shared by every device
    that uses the same layout file. Lookups return None when nothing is
    mapped; they never raise.
    """
    keys_by_scan_code: Mapping[int, KeyEntry]
    keys_by_usage_code: Mapping[int, KeyEntry]
    axes: Mapping[int, AxisInfo]
    leds_by_scan_code: Mapping[int, LedEntry]
    leds_by_usage_code: Mapping[int, LedEntry]
    sensors_by_abs_code: Mapping[int, SensorEntry]
    required_kernel_configs: frozenset[str]
    load_filename: str = ""

    def _get_key(self, scan_code: int, usage_code: int) -> Optional[KeyEntry]:
        if usage_code:
            key = self.keys_by_usage_code.get(usage_code)
            if key is not None:
                return key
        if scan_code:
            return self.keys_by_scan_code.get(scan_code)
        return None

    def map_key(self, scan_code: int, usage_code: int = 0) -> Optional[tuple[int, KeyFlag]]:
        """Map a raw key to (key_code, flags).

        A non-zero usage code is looked up first; the scan code is the
        fallback.
        """
        key = self._get_key(scan_code, usage_code)
        if key is None:
            logger.debug("map_key: scan_code=%d, usage_code=0x%08x ~ Failed.",
                         scan_code, usage_code)
            return None

        logger.debug("map_key: scan_code=%d, usage_code=0x%08x ~ Result key_code=%d, flags=0x%08x.",
                     scan_code, usage_code, key.key_code, key.flags)
        return key.key_code, key.flags

    def map_sensor(self, abs_code: int) -> Optional[tuple[SensorType, int]]:
        """Map a raw abs code to (sensor_type, data_index)."""
        sensor = self.sensors_by_abs_code.get(abs_code)
        if sensor is None:
            logger.debug("map_sensor: abs_code=%d ~ Failed.", abs_code)
            return None

        logger.debug("map_sensor: abs_code=%d, sensor_type=%s, data_index=%d.",
                     abs_code, sensor.sensor_type.name, sensor.data_index)
        return sensor.sensor_type, sensor.data_index

    def map_axis(self, scan_code: int) -> Optional[AxisInfo]:
        """Get the axis transform for a raw abs scan code."""
        axis_info = self.axes.get(scan_code)
        if axis_info is None:
            logger.debug("map_axis: scan_code=%d ~ Failed.", scan_code)
            return None

        logger.debug("map_axis: scan_code=%d ~ Result mode=%s, axis=%d, high_axis=%d, "
                     "split_value=%d, flat_override=%d.",
                     scan_code, axis_info.mode.name, axis_info.axis, axis_info.high_axis,
                     axis_info.split_value, axis_info.flat_override)
        return axis_info

    def find_scan_codes_for_key(self, key_code: int) -> list[int]:
        """Scan codes mapped to key_code, skipping FUNCTION layer keys."""
        return [
            scan_code
            for scan_code, key in self.keys_by_scan_code.items()
            if key.key_code == key_code and not key.flags & KeyFlag.FUNCTION
        ]

    def find_usage_codes_for_key(self, key_code: int) -> list[int]:
        """Usage codes mapped to key_code, skipping fallback usage mappings."""
        return [
            usage_code
            for usage_code, key in self.keys_by_usage_code.items()
            if key.key_code == key_code and not key.flags & KeyFlag.FALLBACK_USAGE_MAPPING
        ]

    def find_scan_code_for_led(self, led_code: int) -> Optional[int]:
        """First scan code mapped to led_code.

        When several scan codes map to the same LED, which one is returned
        is unspecified.
        """
        for scan_code, led in self.leds_by_scan_code.items():
            if led.led_code == led_code:
                logger.debug("find_scan_code_for_led: led_code=%d, scan_code=%d.",
                             led_code, scan_code)
                return scan_code
        logger.debug("find_scan_code_for_led: led_code=%d ~ Not found.", led_code)
        return None

    def find_usage_code_for_led(self, led_code: int) -> Optional[int]:
        """First usage code mapped to led_code (same caveat as for scan codes)."""
        for usage_code, led in self.leds_by_usage_code.items():
            if led.led_code == led_code:
                logger.debug("find_usage_code_for_led: led_code=%d, usage=0x%x.",
                             led_code, usage_code)
                return usage_code
        logger.debug("find_usage_code_for_led: led_code=%d ~ Not found.", led_code)
        return None
