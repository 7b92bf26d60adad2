"""Key layout map loading service."""

from .kernel_config import (
    KERNEL_CONFIG_PATHS,
    kernel_configs_are_present,
    load_kernel_configs,
    missing_kernel_configs,
    parse_kernel_config,
)
from .loader import load, load_contents

__all__ = [
    "KERNEL_CONFIG_PATHS",
    "kernel_configs_are_present",
    "load",
    "load_contents",
    "load_kernel_configs",
    "missing_kernel_configs",
    "parse_kernel_config",
]
