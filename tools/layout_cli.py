#!/usr/bin/env python3
"""Key layout map CLI - validate and inspect .kl files.

Usage:
    layout-cli check FILE...
    layout-cli show FILE
    layout-cli lookup FILE --scan-code 30
    layout-cli lookup FILE --usage-code 0x070004
    layout-cli lookup FILE --axis 0x02
    layout-cli lookup FILE --sensor 0x00
"""

import argparse
import logging
import sys
from pathlib import Path

from crates.input_labels import (
    get_axis_label,
    get_key_code_label,
    get_key_flag_labels,
    get_led_label,
)
from crates.key_layout import AxisMode, KernelConfigError, KeyLayoutError, KeyLayoutMap, parse_int
from services.layout_loader import load, parse_kernel_config


def _int_arg(value: str) -> int:
    code = parse_int(value)
    if code is None:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    return code


def _kernel_configs(args: argparse.Namespace):
    """Pick the kernel config source from the command line options."""
    config_file = getattr(args, "kernel_config", None)
    if config_file:
        return lambda: parse_kernel_config(Path(config_file).read_text(encoding="utf-8"))
    return None


def _load(path: str, args: argparse.Namespace) -> KeyLayoutMap | None:
    try:
        return load(path, kernel_configs=_kernel_configs(args),
                    check_kernel_configs=not getattr(args, "skip_kernel_config", False))
    except (KeyLayoutError, KernelConfigError) as e:
        print(f"{path}: {e}", file=sys.stderr)
        return None


def _key_label(key_code: int) -> str:
    return get_key_code_label(key_code) or str(key_code)


def _flags_label(flags: int) -> str:
    return " ".join(get_key_flag_labels(flags))


def _describe_axis(axis_info) -> str:
    axis = get_axis_label(axis_info.axis) or str(axis_info.axis)
    if axis_info.mode == AxisMode.INVERT:
        text = f"invert {axis}"
    elif axis_info.mode == AxisMode.SPLIT:
        high = get_axis_label(axis_info.high_axis) or str(axis_info.high_axis)
        text = f"split {axis_info.split_value} {axis} {high}"
    else:
        text = axis
    if axis_info.flat_override >= 0:
        text += f" flat {axis_info.flat_override}"
    return text


def cmd_check(args: argparse.Namespace) -> int:
    """Validate one or more layout files."""
    failed = 0
    for path in args.files:
        if _load(path, args) is None:
            failed += 1
        else:
            print(f"{path}: OK")
    return 1 if failed else 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the parsed tables of a layout file."""
    layout = _load(args.file, args)
    if layout is None:
        return 1

    print(f"Layout: {layout.load_filename}")
    for title, table in (("scan code", layout.keys_by_scan_code),
                         ("usage", layout.keys_by_usage_code)):
        for code, key in sorted(table.items()):
            line = f"  key {title} 0x{code:x}: {_key_label(key.key_code)}"
            if key.flags:
                line += f" {_flags_label(key.flags)}"
            print(line)

    for code, axis_info in sorted(layout.axes.items()):
        print(f"  axis 0x{code:x}: {_describe_axis(axis_info)}")

    for title, table in (("scan code", layout.leds_by_scan_code),
                         ("usage", layout.leds_by_usage_code)):
        for code, led in sorted(table.items()):
            label = get_led_label(led.led_code) or str(led.led_code)
            print(f"  led {title} 0x{code:x}: {label}")

    for code, sensor in sorted(layout.sensors_by_abs_code.items()):
        channel = "XYZ"[sensor.data_index]
        print(f"  sensor 0x{code:x}: {sensor.sensor_type.name} {channel}")

    for name in sorted(layout.required_kernel_configs):
        print(f"  requires {name}")
    return 0


def cmd_lookup(args: argparse.Namespace) -> int:
    """Look up a single code in a layout file."""
    layout = _load(args.file, args)
    if layout is None:
        return 1

    if args.axis is not None:
        axis_info = layout.map_axis(args.axis)
        if axis_info is None:
            print(f"axis 0x{args.axis:x}: not mapped")
            return 1
        print(f"axis 0x{args.axis:x}: {_describe_axis(axis_info)}")
        return 0

    if args.sensor is not None:
        result = layout.map_sensor(args.sensor)
        if result is None:
            print(f"sensor 0x{args.sensor:x}: not mapped")
            return 1
        sensor_type, data_index = result
        print(f"sensor 0x{args.sensor:x}: {sensor_type.name} {'XYZ'[data_index]}")
        return 0

    result = layout.map_key(args.scan_code or 0, args.usage_code or 0)
    if result is None:
        print("key: not mapped")
        return 1
    key_code, flags = result
    line = f"key: {_key_label(key_code)}"
    if flags:
        line += f" {_flags_label(flags)}"
    print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layout-cli",
        description="Validate and inspect key layout map files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    gate = parser.add_mutually_exclusive_group()
    gate.add_argument("--kernel-config", metavar="FILE",
                      help="Check required kernel configs against this kconfig file")
    gate.add_argument("--skip-kernel-config", action="store_true",
                      help="Do not check required kernel configs")

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate layout files")
    check.add_argument("files", nargs="+")
    check.set_defaults(func=cmd_check)

    show = subparsers.add_parser("show", help="Print the parsed tables")
    show.add_argument("file")
    show.set_defaults(func=cmd_show)

    lookup = subparsers.add_parser("lookup", help="Look up a raw code")
    lookup.add_argument("file")
    what = lookup.add_mutually_exclusive_group(required=True)
    what.add_argument("--scan-code", type=_int_arg)
    what.add_argument("--usage-code", type=_int_arg)
    what.add_argument("--axis", type=_int_arg)
    what.add_argument("--sensor", type=_int_arg)
    lookup.set_defaults(func=cmd_lookup)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
