"""Command line interface for codebase vitals.

Usage:
    python -m cli check [PATH] [--complexity-threshold N] ...
    python -m cli complexity [PATH] [--threshold N]
    python -m cli smells [PATH] [--threshold N]
    python -m cli coverage [PATH] [--threshold N]
    python -m cli report [PATH]
    python -m cli version

Exit codes: 0 all vitals healthy, 1 at least one unhealthy, 2 error.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path

from shared.config import VitalsConfig, load_config
from shared.log import configure_logging
from shared.models import OutputFormat, Vital
from vitals import __version__
from vitals.checks import create_vital
from vitals.health_report import HealthReport
from vitals.orchestrator import Orchestrator
from vitals.reporters import create_reporter, reporter_for_result
from vitals.reporters.cli_reporter import RULE

EXIT_HEALTHY = 0
EXIT_UNHEALTHY = 1
EXIT_ERROR = 2

VITAL_HEADERS = {
    Vital.COMPLEXITY: "Checking complexity in",
    Vital.SMELLS: "Checking code smells in",
    Vital.COVERAGE: "Checking test coverage in",
}


def _add_threshold_overrides(sp: argparse.ArgumentParser) -> None:
    for vital in Vital:
        sp.add_argument(
            f"--{vital.value}-threshold",
            type=int,
            default=None,
            help=f"Override {vital.value} threshold",
        )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="vitals",
        description="Health scoring for Python codebases",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to configuration file")
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=None,
        help="Output format (default: from config, else cli)",
    )
    parser.add_argument("--debug", action="store_true", help="Show debug logs and tracebacks")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- check ---
    sp_check = subparsers.add_parser("check", help="Run all vitals checks on the codebase")
    sp_check.add_argument("path", nargs="?", default=".", help="File or directory to check")
    _add_threshold_overrides(sp_check)

    # --- single vitals ---
    for vital in Vital:
        sp_vital = subparsers.add_parser(vital.value, help=f"Check {vital.value} only")
        sp_vital.add_argument("path", nargs="?", default=".", help="File or directory to check")
        sp_vital.add_argument("--threshold", type=int, default=None, help="Override threshold")

    # --- report ---
    sp_report = subparsers.add_parser("report", help="Generate full health report")
    sp_report.add_argument("path", nargs="?", default=".", help="File or directory to report on")
    _add_threshold_overrides(sp_report)

    # --- version ---
    subparsers.add_parser("version", help="Show version")

    return parser


def _load_config(args: argparse.Namespace) -> VitalsConfig:
    """Load config and apply threshold flags on top of it."""
    config = load_config(config_path=args.config)

    for vital in Vital:
        value = getattr(args, f"{vital.value}_threshold", None)
        if value is not None:
            config.section(vital).threshold = value

    if getattr(args, "threshold", None) is not None:
        config.section(args.command).threshold = args.threshold

    return config


def _output_format(args: argparse.Namespace, config: VitalsConfig) -> OutputFormat:
    if args.format:
        return OutputFormat(args.format)
    return config.output.format


def _header(text: str, path: str) -> str:
    return f"{text}: {Path(path).expanduser().resolve()}\n{RULE}"


def cmd_check(args: argparse.Namespace) -> int:
    """Run every vital through the orchestrator and print the summary."""
    config = _load_config(args)
    fmt = _output_format(args, config)

    report = Orchestrator(config=config).run(args.path)
    reporter = create_reporter(fmt, report, config)

    if fmt == OutputFormat.JSON:
        print(reporter.render())
    else:
        print(_header("Running vitals check on", args.path))
        print(f"\n{reporter.render_summary()}")

    return EXIT_HEALTHY if report.all_healthy() else EXIT_UNHEALTHY


def cmd_vital(args: argparse.Namespace) -> int:
    """Run a single vital directly. Missing coverage data is an error here."""
    config = _load_config(args)
    fmt = _output_format(args, config)

    vital = create_vital(args.command, config)
    result = vital.check(args.path)

    if fmt == OutputFormat.JSON:
        report = HealthReport(vital_results=[result], config=config)
        print(create_reporter(fmt, report, config).render())
    else:
        print(_header(VITAL_HEADERS[vital.name], args.path))
        print(reporter_for_result(result, config).render_result(result))

    return EXIT_HEALTHY if result.healthy(vital.threshold) else EXIT_UNHEALTHY


def cmd_report(args: argparse.Namespace) -> int:
    """Print the full health report. Exits 0 whenever the run succeeds."""
    config = _load_config(args)
    fmt = _output_format(args, config)

    report = Orchestrator(config=config).run(args.path)
    reporter = create_reporter(fmt, report, config)

    if fmt == OutputFormat.JSON:
        print(reporter.render())
        return EXIT_HEALTHY

    if fmt == OutputFormat.HTML:
        print("HTML format not yet implemented, showing text report", file=sys.stderr)
    print(_header("Generating health report for", args.path))
    print(f"\n{reporter.render()}")
    return EXIT_HEALTHY


def cmd_version(args: argparse.Namespace) -> int:
    print(f"vitals version {__version__}")
    return EXIT_HEALTHY


def _handle_error(error: Exception, debug: bool) -> int:
    print(f"Error: {error}", file=sys.stderr)
    if debug:
        traceback.print_exception(error, file=sys.stderr)
    return EXIT_ERROR


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_UNHEALTHY

    configure_logging(debug=args.debug)

    commands = {
        "check": cmd_check,
        "report": cmd_report,
        "version": cmd_version,
        **{vital.value: cmd_vital for vital in Vital},
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_UNHEALTHY

    try:
        return handler(args)
    except Exception as e:
        return _handle_error(e, args.debug)


if __name__ == "__main__":
    sys.exit(main())
