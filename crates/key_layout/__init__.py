"""Key layout map: raw input codes to keys, axes, LEDs and sensors."""

from .errors import (
    DuplicateEntryError,
    KernelConfigError,
    KeyLayoutError,
    LayoutIOError,
    LayoutParseError,
    LayoutSyntaxError,
    UnknownSymbolError,
    UnsupportedConfigError,
)
from .model import (
    AxisInfo,
    AxisMode,
    KeyEntry,
    KeyLayoutMap,
    LayoutTables,
    LedEntry,
    SensorEntry,
)
from .parser import KeyLayoutParser, parse_int
from .tokenizer import Tokenizer

__all__ = [
    "AxisInfo",
    "AxisMode",
    "DuplicateEntryError",
    "KernelConfigError",
    "KeyEntry",
    "KeyLayoutError",
    "KeyLayoutMap",
    "KeyLayoutParser",
    "LayoutIOError",
    "LayoutParseError",
    "LayoutSyntaxError",
    "LayoutTables",
    "LedEntry",
    "SensorEntry",
    "Tokenizer",
    "UnknownSymbolError",
    "UnsupportedConfigError",
    "parse_int",
]
