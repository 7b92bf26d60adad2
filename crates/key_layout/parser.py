"""Parser for key layout map (.kl) files.

File format, one directive per line, ``#`` starts a comment::

    key 1     ESC
    key 465   ESC               FUNCTION
    key usage 0x0c006F BRIGHTNESSUP
    axis 0x00 X
    axis 0x01 invert Y
    axis 0x02 split 0x7f GAS BRAKE
    axis 0x03 RZ flat 4096
    led 0x00  NUML
    led usage 0x000801 CAPSL
    sensor 0x00 ACCELEROMETER X
    requires_kernel_config CONFIG_HID_PLAYSTATION

Parsing stops at the first bad line; no partial map is ever returned.
"""

import logging
import re
import time
from typing import Optional

from crates.input_labels import (
    KeyFlag,
    get_axis_by_label,
    get_key_code_by_label,
    get_key_flag_by_label,
    get_led_by_label,
    get_sensor_type_by_label,
)

from .errors import DuplicateEntryError, LayoutSyntaxError, UnknownSymbolError
from .model import AxisInfo, AxisMode, KeyEntry, KeyLayoutMap, LayoutTables, LedEntry, SensorEntry
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)
trace = logging.getLogger(__name__ + ".trace")

WHITESPACE = " \t\r"

_INT_LITERAL = re.compile(r"[+-]?(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1

SENSOR_DATA_INDEXES = {"X": 0, "Y": 1, "Z": 2}


def parse_int(token: str) -> Optional[int]:
    """Parse a C-style integer literal (decimal, 0x hex or 0 octal).

    Returns None when the token is not a literal or does not fit in 32 bits.
    """
    if not _INT_LITERAL.fullmatch(token):
        return None
    digits = token.lstrip("+-")
    if digits[:2] in ("0x", "0X"):
        value = int(digits, 16)
    elif len(digits) > 1 and digits[0] == "0":
        value = int(digits, 8)
    else:
        value = int(digits)
    if token.startswith("-"):
        value = -value
    if not _INT32_MIN <= value <= _INT32_MAX:
        logger.error("Out of bounds: %s", token)
        return None
    return value


class KeyLayoutParser:
    """Builds a KeyLayoutMap from a tokenizer, one directive per line."""

    def __init__(self, tokenizer: Tokenizer):
        self._tokenizer = tokenizer
        self._tables = LayoutTables()
        self._handlers = {
            "key": self._parse_key,
            "axis": self._parse_axis,
            "led": self._parse_led,
            "sensor": self._parse_sensor,
            "requires_kernel_config": self._parse_required_kernel_config,
        }

    def parse(self) -> KeyLayoutMap:
        """Parse the whole file.

        Raises:
            LayoutSyntaxError: Malformed directive or trailing garbage.
            UnknownSymbolError: A label that does not resolve.
            DuplicateEntryError: A code, flag or config given twice.
        """
        tokenizer = self._tokenizer
        start_time = time.monotonic()

        while not tokenizer.is_eof():
            trace.debug("Parsing %s: '%s'.", tokenizer.get_location(),
                        tokenizer.peek_remainder_of_line())

            tokenizer.skip_delimiters(WHITESPACE)

            if not self._at_end_of_directive():
                keyword = tokenizer.next_token(WHITESPACE)
                handler = self._handlers.get(keyword)
                if handler is None:
                    self._fail(LayoutSyntaxError, "Expected keyword, got '%s'.", keyword)

                tokenizer.skip_delimiters(WHITESPACE)
                handler()

                tokenizer.skip_delimiters(WHITESPACE)
                if not self._at_end_of_directive():
                    self._fail(LayoutSyntaxError,
                               "Expected end of line or trailing comment, got '%s'.",
                               tokenizer.peek_remainder_of_line())

            tokenizer.next_line()

        logger.debug("Parsed key layout map file '%s' %d lines in %0.3fms.",
                     tokenizer.filename, tokenizer.line_number,
                     (time.monotonic() - start_time) * 1000.0)
        return self._tables.freeze()

    def _at_end_of_directive(self) -> bool:
        return self._tokenizer.is_eol() or self._tokenizer.peek_char() == "#"

    def _fail(self, error_class, message: str, token: str):
        """Log and raise a located parse error."""
        location = self._tokenizer.get_location()
        logger.error("%s: " + message, location, token)
        raise error_class(f"{location}: {message % token}", location=location,
                          token=token, filename=self._tokenizer.filename)

    def _next_token(self) -> str:
        self._tokenizer.skip_delimiters(WHITESPACE)
        return self._tokenizer.next_token(WHITESPACE)

    def _next_int(self, what: str) -> int:
        token = self._next_token()
        value = parse_int(token)
        if value is None:
            self._fail(LayoutSyntaxError, f"Expected {what}, got '%s'.", token)
        return value

    def _next_label(self, what: str, resolve):
        """Read a label and resolve it; a missing label is a syntax error."""
        token = self._next_token()
        if not token:
            self._fail(LayoutSyntaxError, f"Expected {what}, got '%s'.", token)
        value = resolve(token)
        if value is None:
            self._fail(UnknownSymbolError, f"Expected {what}, got '%s'.", token)
        return value

    def _next_code(self, kind: str) -> tuple[bool, int, str]:
        """Read ``[usage] <code>``; returns (is_usage, code, code_name)."""
        token = self._next_token()
        map_usage = token == "usage"
        if map_usage:
            token = self._next_token()
        code_name = "usage" if map_usage else "scan code"
        code = parse_int(token)
        if code is None:
            self._fail(LayoutSyntaxError, f"Expected {kind} {code_name} number, got '%s'.", token)
        return map_usage, code, code_name

    def _parse_key(self) -> None:
        map_usage, code, code_name = self._next_code("key")
        table = self._tables.keys_by_usage_code if map_usage else self._tables.keys_by_scan_code
        if code in table:
            self._fail(DuplicateEntryError, f"Duplicate entry for key {code_name} '%s'.", str(code))

        key_code = self._next_label("key code label", get_key_code_by_label)

        flags = KeyFlag.NONE
        while True:
            self._tokenizer.skip_delimiters(WHITESPACE)
            if self._at_end_of_directive():
                break
            flag_token = self._tokenizer.next_token(WHITESPACE)
            flag = get_key_flag_by_label(flag_token)
            if flag is None:
                self._fail(UnknownSymbolError, "Expected key flag label, got '%s'.", flag_token)
            if flags & flag:
                self._fail(DuplicateEntryError, "Duplicate key flag '%s'.", flag_token)
            flags |= flag

        trace.debug("Parsed key %s: code=%d, key_code=%d, flags=0x%08x.",
                    code_name, code, key_code, flags)
        table[code] = KeyEntry(key_code=key_code, flags=flags)

    def _parse_axis(self) -> None:
        scan_code = self._next_int("axis scan code number")
        if scan_code in self._tables.axes:
            self._fail(DuplicateEntryError, "Duplicate entry for axis scan code '%s'.",
                       str(scan_code))

        mode = AxisMode.NORMAL
        high_axis = -1
        split_value = 0
        flat_override = -1

        token = self._next_token()
        if token == "invert":
            mode = AxisMode.INVERT
            axis = self._next_label("inverted axis label", get_axis_by_label)
        elif token == "split":
            mode = AxisMode.SPLIT
            split_value = self._next_int("split value")
            axis = self._next_label("low axis label", get_axis_by_label)
            high_axis = self._next_label("high axis label", get_axis_by_label)
        else:
            if not token:
                self._fail(LayoutSyntaxError,
                           "Expected axis label, 'split' or 'invert', got '%s'.", token)
            axis = get_axis_by_label(token)
            if axis is None:
                self._fail(UnknownSymbolError,
                           "Expected axis label, 'split' or 'invert', got '%s'.", token)

        while True:
            self._tokenizer.skip_delimiters(WHITESPACE)
            if self._at_end_of_directive():
                break
            keyword = self._tokenizer.next_token(WHITESPACE)
            if keyword != "flat":
                self._fail(LayoutSyntaxError, "Expected keyword 'flat', got '%s'.", keyword)
            flat_override = self._next_int("flat value")

        axis_info = AxisInfo(mode=mode, axis=axis, high_axis=high_axis,
                             split_value=split_value, flat_override=flat_override)
        trace.debug("Parsed axis: scan_code=%d, mode=%s, axis=%d, high_axis=%d, "
                    "split_value=%d, flat_override=%d.",
                    scan_code, mode.name, axis, high_axis, split_value, flat_override)
        self._tables.axes[scan_code] = axis_info

    def _parse_led(self) -> None:
        map_usage, code, code_name = self._next_code("led")
        table = self._tables.leds_by_usage_code if map_usage else self._tables.leds_by_scan_code
        if code in table:
            self._fail(DuplicateEntryError, f"Duplicate entry for led {code_name} '%s'.", str(code))

        led_code = self._next_label("LED code label", get_led_by_label)

        trace.debug("Parsed led %s: code=%d, led_code=%d.", code_name, code, led_code)
        table[code] = LedEntry(led_code=led_code)

    def _parse_sensor(self) -> None:
        code = self._next_int("sensor abs code number")
        table = self._tables.sensors_by_abs_code
        if code in table:
            self._fail(DuplicateEntryError, "Duplicate entry for sensor abs code '%s'.", str(code))

        sensor_type = self._next_label("sensor type label", get_sensor_type_by_label)

        index_token = self._next_token()
        data_index = SENSOR_DATA_INDEXES.get(index_token)
        if data_index is None:
            self._fail(LayoutSyntaxError, "Expected sensor data index label, got '%s'.",
                       index_token)

        trace.debug("Parsed sensor: abs_code=%d, sensor_type=%s, data_index=%d.",
                    code, sensor_type.name, data_index)
        table[code] = SensorEntry(sensor_type=sensor_type, data_index=data_index)

    def _parse_required_kernel_config(self) -> None:
        config_name = self._next_token()
        if not config_name:
            self._fail(LayoutSyntaxError, "Expected kernel config name, got '%s'.", config_name)

        configs = self._tables.required_kernel_configs
        if config_name in configs:
            self._fail(DuplicateEntryError, "Duplicate entry for required kernel config %s.",
                       config_name)
        configs.add(config_name)

        trace.debug("Parsed required kernel config: name=%s", config_name)
