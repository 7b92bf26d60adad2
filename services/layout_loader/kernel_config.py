"""Kernel build configuration lookup."""

import gzip
import logging
import os
import re
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Union

from crates.key_layout import KernelConfigError

logger = logging.getLogger(__name__)

# Searched in order; {release} is the running kernel release
KERNEL_CONFIG_PATHS = (
    "/proc/config.gz",
    "/boot/config-{release}",
)

KernelConfigSource = Union[Mapping[str, str], Callable[[], Mapping[str, str]]]

_CONFIG_LINE = re.compile(r"^(CONFIG_\w+)=(.*)$")
_NOT_SET_LINE = re.compile(r"^# (CONFIG_\w+) is not set$")


def parse_kernel_config(text: str) -> dict[str, str]:
    """Parse kconfig text into config name -> value.

    ``# CONFIG_FOO is not set`` lines are reported as ``"n"``; quoted
    string values keep their quotes stripped.
    """
    configs: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        match = _CONFIG_LINE.match(line)
        if match:
            configs[match.group(1)] = match.group(2).strip('"')
            continue
        match = _NOT_SET_LINE.match(line)
        if match:
            configs[match.group(1)] = "n"
    return configs


def load_kernel_configs(paths: Iterable[str] = KERNEL_CONFIG_PATHS) -> dict[str, str]:
    """Read the running kernel's configuration.

    Raises:
        KernelConfigError: No configuration source exists or it could not be read.
    """
    release = os.uname().release
    for pattern in paths:
        path = Path(pattern.format(release=release))
        if not path.exists():
            continue
        try:
            if path.suffix == ".gz":
                with gzip.open(path, "rt", encoding="utf-8", errors="replace") as f:
                    text = f.read()
            else:
                text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise KernelConfigError(f"Kernel configs could not be read from {path}: {e}") from e
        logger.debug("Loaded kernel config from %s", path)
        return parse_kernel_config(text)

    raise KernelConfigError("Kernel configs could not be fetched")


def resolve_kernel_configs(source: Optional[KernelConfigSource] = None) -> Mapping[str, str]:
    """Turn a mapping, a zero-arg callable or None (system) into a mapping."""
    if source is None:
        return load_kernel_configs()
    if callable(source):
        try:
            return source()
        except OSError as e:
            raise KernelConfigError(f"Kernel configs could not be fetched: {e}") from e
    return source


def missing_kernel_configs(required: Iterable[str],
                           source: Optional[KernelConfigSource] = None) -> list[str]:
    """Required configs that are neither built in ("y") nor a module ("m").

    The configuration is only queried when something is required.
    """
    required = sorted(required)
    if not required:
        return []

    kernel_configs = resolve_kernel_configs(source)
    missing = []
    for name in required:
        option = kernel_configs.get(name)
        if option is None:
            logger.info("Required kernel config %s is not found", name)
            missing.append(name)
        elif option not in ("y", "m"):
            logger.info("Required kernel config %s has option %s", name, option)
            missing.append(name)
    return missing


def kernel_configs_are_present(required: Iterable[str],
                               source: Optional[KernelConfigSource] = None) -> bool:
    """Check every required config is enabled in the kernel."""
    return not missing_kernel_configs(required, source)
