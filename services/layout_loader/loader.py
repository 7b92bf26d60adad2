"""Key layout map loader - open, parse and gate on kernel configs."""

import dataclasses
import logging
from pathlib import Path
from typing import Optional

from crates.key_layout import (
    KeyLayoutMap,
    KeyLayoutParser,
    LayoutIOError,
    Tokenizer,
    UnsupportedConfigError,
)

from .kernel_config import KernelConfigSource, missing_kernel_configs

logger = logging.getLogger(__name__)


def _open_tokenizer(filename: str, contents: Optional[str]) -> Tokenizer:
    if contents is not None:
        return Tokenizer.from_contents(filename, contents)
    try:
        return Tokenizer.open(filename)
    except OSError as e:
        logger.error("Error %s opening key layout map file %s.", e.errno, filename)
        raise LayoutIOError(
            f"Error {e.errno} opening key layout map file {filename}: {e.strerror}",
            filename=filename,
            errno=e.errno,
        ) from e
    except UnicodeDecodeError as e:
        logger.error("Key layout map file %s is not valid UTF-8.", filename)
        raise LayoutIOError(
            f"Key layout map file {filename} is not valid UTF-8: {e.reason}",
            filename=filename,
        ) from e


def load(filename: str | Path, contents: Optional[str] = None,
         kernel_configs: Optional[KernelConfigSource] = None,
         check_kernel_configs: bool = True) -> KeyLayoutMap:
    """Load a key layout map.

    Args:
        filename: Path of the file; also used in diagnostics.
        contents: File contents. When given, the file is not read.
        kernel_configs: Kernel config name -> value mapping, or a callable
            returning one. Defaults to the running kernel's configuration.
        check_kernel_configs: Set to False to skip the kernel config gate.

    Returns:
        The parsed, read-only map with ``load_filename`` set.

    Raises:
        LayoutIOError: The file could not be read.
        LayoutParseError: The file is malformed (syntax, unknown label, duplicate).
        UnsupportedConfigError: The file requires kernel configs that are not enabled.
        KernelConfigError: The kernel configuration could not be queried.
    """
    filename = str(filename)
    tokenizer = _open_tokenizer(filename, contents)
    layout = KeyLayoutParser(tokenizer).parse()

    missing = []
    if check_kernel_configs:
        missing = missing_kernel_configs(layout.required_kernel_configs, kernel_configs)
    if missing:
        logger.info("Not loading %s because the required kernel configs are not set", filename)
        raise UnsupportedConfigError(
            f"Missing kernel config for {filename}: {', '.join(missing)}",
            filename=filename,
            missing=missing,
        )

    return dataclasses.replace(layout, load_filename=filename)


def load_contents(filename: str, contents: str,
                  kernel_configs: Optional[KernelConfigSource] = None,
                  check_kernel_configs: bool = True) -> KeyLayoutMap:
    """Load a key layout map from in-memory contents."""
    return load(filename, contents, kernel_configs=kernel_configs,
                check_kernel_configs=check_kernel_configs)
