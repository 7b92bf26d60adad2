"""Input event label tables and lookups."""

from enum import IntEnum, IntFlag

from evdev import ecodes


class KeyFlag(IntFlag):
    """Policy flags attached to a key mapping."""
    NONE = 0
    WAKE = 0x00000001
    VIRTUAL = 0x00000002
    FUNCTION = 0x00000004
    GESTURE = 0x00000008
    FALLBACK_USAGE_MAPPING = 0x00000010


class SensorType(IntEnum):
    """Motion and environment sensor types a raw abs axis can feed."""
    ACCELEROMETER = 1
    MAGNETIC_FIELD = 2
    ORIENTATION = 3
    GYROSCOPE = 4
    LIGHT = 5
    PRESSURE = 6
    TEMPERATURE = 7
    PROXIMITY = 8
    GRAVITY = 9
    LINEAR_ACCELERATION = 10
    ROTATION_VECTOR = 11
    RELATIVE_HUMIDITY = 12
    AMBIENT_TEMPERATURE = 13
    MAGNETIC_FIELD_UNCALIBRATED = 14
    GAME_ROTATION_VECTOR = 15
    GYROSCOPE_UNCALIBRATED = 16
    SIGNIFICANT_MOTION = 17


# Bookkeeping names in ecodes that are not real codes
_SKIPPED_SUFFIXES = ("_MAX", "_CNT", "_RESERVED")
_SKIPPED_NAMES = {"KEY_MIN_INTERESTING"}


def _labels_for_prefix(prefix: str, strip: bool = True) -> dict[str, int]:
    """Collect ecodes names starting with prefix into a label -> code table."""
    labels: dict[str, int] = {}
    for name, code in sorted(ecodes.ecodes.items()):
        if not name.startswith(prefix) or name in _SKIPPED_NAMES:
            continue
        if name.endswith(_SKIPPED_SUFFIXES):
            continue
        label = name[len(prefix):] if strip else name
        labels.setdefault(label, code)
    return labels


# Key code labels: KEY_* names without the prefix ("A", "ESC", "LEFTCTRL"),
# BTN_* names as-is ("BTN_LEFT", "BTN_SOUTH")
KEY_LABELS: dict[str, int] = _labels_for_prefix("KEY_")
KEY_LABELS.update(_labels_for_prefix("BTN_", strip=False))

# Friendly aliases accepted in layout files
KEY_ALIASES: dict[str, str] = {
    # Mouse buttons
    "MOUSE_LEFT": "BTN_LEFT",
    "MOUSE_RIGHT": "BTN_RIGHT",
    "MOUSE_MIDDLE": "BTN_MIDDLE",
    "MOUSE_SIDE": "BTN_SIDE",
    "MOUSE_EXTRA": "BTN_EXTRA",
    "MOUSE_FORWARD": "BTN_FORWARD",
    "MOUSE_BACK": "BTN_BACK",

    # Modifiers
    "CTRL": "LEFTCTRL",
    "CTRL_R": "RIGHTCTRL",
    "SHIFT": "LEFTSHIFT",
    "SHIFT_R": "RIGHTSHIFT",
    "ALT": "LEFTALT",
    "ALT_R": "RIGHTALT",
    "META": "LEFTMETA",
    "META_R": "RIGHTMETA",

    # Special keys
    "ESCAPE": "ESC",
    "CAPS": "CAPSLOCK",
    "DEL": "DELETE",
    "PAGE_UP": "PAGEUP",
    "PAGE_DOWN": "PAGEDOWN",
    "DPAD_UP": "UP",
    "DPAD_DOWN": "DOWN",
    "DPAD_LEFT": "LEFT",
    "DPAD_RIGHT": "RIGHT",

    # Media keys
    "VOL_UP": "VOLUMEUP",
    "VOL_DOWN": "VOLUMEDOWN",
    "PLAY_PAUSE": "PLAYPAUSE",
    "STOP": "STOPCD",
    "PREV_TRACK": "PREVIOUSSONG",
    "NEXT_TRACK": "NEXTSONG",

    # Print screen / scroll lock
    "PRINT_SCREEN": "SYSRQ",
    "SCROLL_LOCK": "SCROLLLOCK",
    "NUM_LOCK": "NUMLOCK",

    # Punctuation
    "LBRACKET": "LEFTBRACE",
    "RBRACKET": "RIGHTBRACE",
    "PERIOD": "DOT",
}

# Numpad keys
for i in range(10):
    KEY_ALIASES[f"NUM_{i}"] = f"KP{i}"
KEY_ALIASES["NUM_ENTER"] = "KPENTER"
KEY_ALIASES["NUM_PLUS"] = "KPPLUS"
KEY_ALIASES["NUM_MINUS"] = "KPMINUS"
KEY_ALIASES["NUM_MULT"] = "KPASTERISK"
KEY_ALIASES["NUM_DIV"] = "KPSLASH"
KEY_ALIASES["NUM_DOT"] = "KPDOT"

# Axis labels: ABS_* names without the prefix ("X", "RZ", "HAT0X")
AXIS_LABELS: dict[str, int] = _labels_for_prefix("ABS_")
AXIS_ALIASES: dict[str, str] = {
    "HAT_X": "HAT0X",
    "HAT_Y": "HAT0Y",
}

# LED labels: LED_* names without the prefix ("NUML", "CAPSL")
LED_LABELS: dict[str, int] = _labels_for_prefix("LED_")
LED_ALIASES: dict[str, str] = {
    "NUM_LOCK": "NUML",
    "CAPS_LOCK": "CAPSL",
    "SCROLL_LOCK": "SCROLLL",
    "CONTROLLER_1": "MISC",
}

FLAG_LABELS: dict[str, KeyFlag] = {
    flag.name: flag for flag in KeyFlag if flag is not KeyFlag.NONE
}

SENSOR_LABELS: dict[str, SensorType] = {
    sensor.name: sensor for sensor in SensorType
}


def _reverse(labels: dict[str, int]) -> dict[int, str]:
    """Build code -> label, keeping the first label seen for each code."""
    reverse: dict[int, str] = {}
    for label, code in labels.items():
        reverse.setdefault(code, label)
    return reverse


_KEY_CODE_TO_LABEL = _reverse(KEY_LABELS)
_AXIS_TO_LABEL = _reverse(AXIS_LABELS)
_LED_TO_LABEL = _reverse(LED_LABELS)


def _lookup(label: str, labels: dict[str, int], aliases: dict[str, str]) -> int | None:
    if label in labels:
        return labels[label]
    canonical = aliases.get(label)
    if canonical is not None:
        return labels.get(canonical)
    return None


def get_key_code_by_label(label: str) -> int | None:
    """Resolve a key code label ("A", "ESC", "BTN_SOUTH", "CTRL") to its code."""
    return _lookup(label, KEY_LABELS, KEY_ALIASES)


def get_key_flag_by_label(label: str) -> KeyFlag | None:
    """Resolve a key flag label ("FUNCTION", "VIRTUAL", ...)."""
    return FLAG_LABELS.get(label)


def get_axis_by_label(label: str) -> int | None:
    """Resolve an axis label ("X", "RZ", "HAT0X") to its abs code."""
    return _lookup(label, AXIS_LABELS, AXIS_ALIASES)


def get_led_by_label(label: str) -> int | None:
    """Resolve a LED label ("CAPSL", "NUM_LOCK") to its LED code."""
    return _lookup(label, LED_LABELS, LED_ALIASES)


def get_sensor_type_by_label(label: str) -> SensorType | None:
    """Resolve a sensor type label ("ACCELEROMETER", "GYROSCOPE", ...)."""
    return SENSOR_LABELS.get(label)


def get_key_code_label(key_code: int) -> str | None:
    """Get the canonical label for a key code."""
    return _KEY_CODE_TO_LABEL.get(key_code)


def get_axis_label(axis: int) -> str | None:
    """Get the canonical label for an axis code."""
    return _AXIS_TO_LABEL.get(axis)


def get_led_label(led_code: int) -> str | None:
    """Get the canonical label for a LED code."""
    return _LED_TO_LABEL.get(led_code)


def get_key_flag_labels(flags: int) -> list[str]:
    """Split a flag bitmask into its labels, lowest bit first."""
    return [label for label, flag in FLAG_LABELS.items() if flags & flag]
