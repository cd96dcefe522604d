from __future__ import annotations

import argparse
import sys

import structlog

from kmatrix.config import ConfigError, RunConfig, resolve_config, validate_config
from kmatrix.executor import CancellationSource, ExecutionContext, Executor, RunResult
from kmatrix.logging_config import configure_logging
from kmatrix.report import ReportWriteError, exit_code, renderer_for, write_report

from .args import build_parser

logger = structlog.get_logger(__name__)

_OVERRIDE_KEYS = ("vng_path", "cmd", "parallel", "out_path", "report_only", "kernel_versions")


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        configure_logging(args.log_level)

        match args.command:
            case "run":
                return cmd_run(args)
            case "config":
                return cmd_config(args)
            case _:
                return 2

    except (ConfigError, ReportWriteError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    config = _config_from(args)
    validate_config(config)

    rr = _run_with(config)
    if rr.failed:
        logger.info("Some kernel versions did not succeed", failed=len(rr.failed))

    text = renderer_for(config.report_only).render(rr.results)
    write_report(text, config.out_path)
    return exit_code(rr.results)


def cmd_config(args: argparse.Namespace) -> int:
    config = _config_from(args)
    print(config)
    return 0


def _config_from(args: argparse.Namespace) -> RunConfig:
    overrides = {key: getattr(args, key) for key in _OVERRIDE_KEYS}
    return resolve_config(args.config, overrides)


def _run_with(config: RunConfig) -> RunResult:
    ctx = ExecutionContext()
    executor = Executor(config)
    with CancellationSource(ctx):
        return executor.run(ctx)
