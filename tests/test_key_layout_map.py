"""Tests for KeyLayoutMap lookups."""

import dataclasses
from types import MappingProxyType

import pytest
from evdev import ecodes

from crates.input_labels import KeyFlag, SensorType
from crates.key_layout import (
    AxisInfo,
    AxisMode,
    KeyEntry,
    KeyLayoutParser,
    LayoutTables,
    LedEntry,
    SensorEntry,
    Tokenizer,
)

# --- Fixtures ---


@pytest.fixture
def keyboard_layout():
    """A keyboard layout with a function layer and usage fallbacks."""
    contents = """\
key 1       ESC
key 30      A
key 59      F1
key 465     F1            FUNCTION
key 466     A             FUNCTION
key usage 0x070004 A
key usage 0x0c0001 A      FALLBACK_USAGE_MAPPING
key usage 0x07003a F1

axis 0x00   X
axis 0x05   split 20 Y RZ

led 0x00    NUML
led 0x01    CAPSL
led usage 0x080001 NUML

sensor 0x03 GYROSCOPE Z
"""
    return KeyLayoutParser(Tokenizer.from_contents("keyboard.kl", contents)).parse()


class TestMapKey:
    """Tests for map_key."""

    def test_scan_code(self, keyboard_layout):
        """Test lookup by scan code alone."""
        assert keyboard_layout.map_key(30) == (ecodes.KEY_A, KeyFlag.NONE)

    def test_usage_takes_precedence(self, keyboard_layout):
        """Test the usage table wins when the usage code is non-zero."""
        # scan code 1 is ESC, usage 0x07003a is F1
        assert keyboard_layout.map_key(1, 0x07003A) == (ecodes.KEY_F1, KeyFlag.NONE)

    def test_usage_falls_back_to_scan_code(self, keyboard_layout):
        """Test an unmapped usage code falls back to the scan code."""
        assert keyboard_layout.map_key(1, 0x0700FF) == (ecodes.KEY_ESC, KeyFlag.NONE)

    def test_usage_only(self, keyboard_layout):
        """Test lookup by usage code with no scan code."""
        assert keyboard_layout.map_key(0, 0x070004) == (ecodes.KEY_A, KeyFlag.NONE)

    def test_flags_returned(self, keyboard_layout):
        """Test flags come back with the key code."""
        assert keyboard_layout.map_key(465) == (ecodes.KEY_F1, KeyFlag.FUNCTION)

    def test_not_found(self, keyboard_layout):
        """Test unmapped codes return None."""
        assert keyboard_layout.map_key(999, 0x07FFFF) is None

    def test_both_zero(self, keyboard_layout):
        """Test zero scan and usage codes never match."""
        assert keyboard_layout.map_key(0, 0) is None


class TestReverseKeyLookup:
    """Tests for find_scan_codes_for_key and find_usage_codes_for_key."""

    def test_scan_codes_exclude_function_layer(self, keyboard_layout):
        """Test FUNCTION-flagged scan codes are skipped."""
        assert keyboard_layout.find_scan_codes_for_key(ecodes.KEY_F1) == [59]
        assert keyboard_layout.find_scan_codes_for_key(ecodes.KEY_A) == [30]

    def test_usage_codes_exclude_fallback(self, keyboard_layout):
        """Test fallback usage mappings are skipped."""
        assert keyboard_layout.find_usage_codes_for_key(ecodes.KEY_A) == [0x070004]

    def test_no_matches(self, keyboard_layout):
        """Test unmapped key codes give an empty list."""
        assert keyboard_layout.find_scan_codes_for_key(ecodes.KEY_Z) == []
        assert keyboard_layout.find_usage_codes_for_key(ecodes.KEY_Z) == []

    def test_multiple_scan_codes(self):
        """Test every non-function scan code is returned."""
        layout = KeyLayoutParser(
            Tokenizer.from_contents("dup.kl", "key 30 A\nkey 31 A\nkey 32 A VIRTUAL\n")
        ).parse()
        assert sorted(layout.find_scan_codes_for_key(ecodes.KEY_A)) == [30, 31, 32]


class TestMapAxis:
    """Tests for map_axis."""

    def test_mapped_axis(self, keyboard_layout):
        """Test a mapped split axis."""
        axis_info = keyboard_layout.map_axis(0x05)
        assert axis_info == AxisInfo(
            mode=AxisMode.SPLIT,
            axis=ecodes.ABS_Y,
            high_axis=ecodes.ABS_RZ,
            split_value=20,
        )

    def test_absent_axis(self, keyboard_layout):
        """Test an unmapped axis returns None."""
        assert keyboard_layout.map_axis(0x10) is None


class TestMapSensor:
    """Tests for map_sensor."""

    def test_mapped_sensor(self, keyboard_layout):
        """Test a mapped sensor channel."""
        assert keyboard_layout.map_sensor(0x03) == (SensorType.GYROSCOPE, 2)

    def test_accelerometer_x(self):
        """Test sensor 0 ACCELEROMETER X."""
        layout = KeyLayoutParser(
            Tokenizer.from_contents("accel.kl", "sensor 0 ACCELEROMETER X\n")
        ).parse()
        assert layout.map_sensor(0) == (SensorType.ACCELEROMETER, 0)

    def test_absent_sensor(self, keyboard_layout):
        """Test an unmapped abs code returns None."""
        assert keyboard_layout.map_sensor(0x00) is None


class TestLedLookup:
    """Tests for find_scan_code_for_led and find_usage_code_for_led."""

    def test_scan_code_for_led(self, keyboard_layout):
        """Test LED to scan code."""
        assert keyboard_layout.find_scan_code_for_led(ecodes.LED_CAPSL) == 0x01

    def test_usage_code_for_led(self, keyboard_layout):
        """Test LED to usage code."""
        assert keyboard_layout.find_usage_code_for_led(ecodes.LED_NUML) == 0x080001

    def test_led_not_found(self, keyboard_layout):
        """Test unmapped LEDs return None."""
        assert keyboard_layout.find_scan_code_for_led(ecodes.LED_KANA) is None
        assert keyboard_layout.find_usage_code_for_led(ecodes.LED_CAPSL) is None

    def test_aliased_led_returns_one_of_them(self):
        """Test a LED mapped from several codes returns any one of them.

        Which code wins is unspecified.
        """
        layout = KeyLayoutParser(
            Tokenizer.from_contents("alias.kl", "led 0 NUML\nled 7 NUML\n")
        ).parse()
        assert layout.find_scan_code_for_led(ecodes.LED_NUML) in (0, 7)


class TestImmutability:
    """Tests that a loaded map cannot be changed."""

    def test_tables_are_read_only(self, keyboard_layout):
        """Test tables reject item assignment."""
        with pytest.raises(TypeError):
            keyboard_layout.keys_by_scan_code[2] = KeyEntry(key_code=ecodes.KEY_1)
        with pytest.raises(TypeError):
            keyboard_layout.axes[1] = AxisInfo(axis=ecodes.ABS_Y)

    def test_attributes_are_frozen(self, keyboard_layout):
        """Test attributes cannot be reassigned."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            keyboard_layout.load_filename = "other.kl"

    def test_required_configs_frozen(self, keyboard_layout):
        """Test the required config set is a frozenset."""
        assert isinstance(keyboard_layout.required_kernel_configs, frozenset)

    def test_freeze_copies_tables(self):
        """Test later builder changes do not leak into a frozen map."""
        tables = LayoutTables()
        tables.leds_by_scan_code[0] = LedEntry(led_code=ecodes.LED_NUML)
        layout = tables.freeze("built.kl")

        tables.leds_by_scan_code[1] = LedEntry(led_code=ecodes.LED_CAPSL)
        tables.sensors_by_abs_code[0] = SensorEntry(SensorType.LIGHT, 0)

        assert isinstance(layout.leds_by_scan_code, MappingProxyType)
        assert list(layout.leds_by_scan_code) == [0]
        assert not layout.sensors_by_abs_code
        assert layout.load_filename == "built.kl"
