from __future__ import annotations

import argparse

from kmatrix.config.types import DEFAULT_CONFIG_PATH
from kmatrix.logging_config import LEVELS


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kmatrix")

    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=sorted(LEVELS),
        help="Log level",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Run the command on every kernel version")
    _add_overrides(run)

    # config
    config = subparsers.add_parser("config", help="Show the resolved configuration")
    _add_overrides(config)

    return parser


def _add_overrides(parser: argparse.ArgumentParser) -> None:
    # Flags default to None so that unset ones fall through to the config file.
    parser.add_argument(
        "--vng-path",
        dest="vng_path",
        help="Absolute path to the vng binary or its name if in PATH",
    )
    parser.add_argument(
        "--cmd",
        help="Path and arguments of the binary to test (e.g. /usr/bin/echo hello)",
    )
    parser.add_argument(
        "--parallel",
        type=_positive_int,
        help="Number of kernels booted in parallel",
    )
    parser.add_argument(
        "--out-path",
        dest="out_path",
        help="Report output file (stdout if empty)",
    )
    parser.add_argument(
        "--report-only",
        dest="report_only",
        action="store_true",
        default=None,
        help="Only print the result table, without captured messages",
    )
    parser.add_argument(
        "--kernel-versions",
        dest="kernel_versions",
        type=_csv,
        action="extend",
        help="Comma separated kernel versions (e.g. v5.4.293,v5.10)",
    )
