"""Command-line interface for motionprof.

Batch operations on saved motion documents: inspect, export samples,
run the repair sweep, and convert between file formats.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from motionprof.core.config.loader import load_app_config
from motionprof.core.config.models import AppConfig
from motionprof.core.session import EditSession
from motionprof.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


def open_session(path: Path, config: AppConfig) -> EditSession | None:
    """Load a document into a session, printing an error and returning None on failure."""
    session = EditSession.from_config(config)
    if not path.exists():
        console.print(f"[red]ERROR: File not found: {path}[/red]")
        return None
    if not session.load(path):
        console.print(f"[red]ERROR: Could not read motion document: {path}[/red]")
        return None
    return session


def cmd_info(args: argparse.Namespace, config: AppConfig) -> int:
    session = open_session(Path(args.file), config)
    if session is None:
        return 1
    document = session.document

    table = Table(title=f"{args.file} (id: {document.doc_id})")
    table.add_column("Motor")
    table.add_column("Nodes", justify="right")
    table.add_column("Range")
    table.add_column("Max slope", justify="right")
    table.add_column("Scale", justify="right")
    table.add_column("End (ms)", justify="right")
    table.add_column("Slope violations", justify="right")

    for profile in document:
        violations = profile.slope_violations()
        table.add_row(
            profile.name,
            str(profile.node_count),
            f"[{profile.y_min:g}, {profile.y_max:g}]",
            f"{profile.max_slope:g}",
            f"{session.scale_of(profile):g}",
            f"{profile.end_time:g}",
            f"[yellow]{len(violations)}[/yellow]" if violations else "0",
        )
    console.print(table)
    return 0


def cmd_export(args: argparse.Namespace, config: AppConfig) -> int:
    session = open_session(Path(args.file), config)
    if session is None:
        return 1
    document = session.document

    rate = args.rate if args.rate is not None else config.export.sample_rate_hz
    end = (
        args.end
        if args.end is not None
        else document.default_export_end_time(config.export.min_end_time_ms)
    )
    doc_id = args.id or config.export.default_id

    if rate <= 0 or end < 0:
        console.print("[red]ERROR: --rate must be > 0 and --end must be >= 0[/red]")
        return 1

    if not document.export_samples_to_file(Path(args.out), rate, end, doc_id):
        console.print(f"[red]ERROR: Could not write {args.out}[/red]")
        return 1
    console.print(
        f"[green]Exported {len(document)} motor(s) at {rate:g} Hz up to {end:g} ms "
        f"to {args.out}[/green]"
    )
    return 0


def cmd_repair(args: argparse.Namespace, config: AppConfig) -> int:
    session = open_session(Path(args.file), config)
    if session is None:
        return 1
    document = session.document

    changed = [profile.name for profile in document if profile.check_all_nodes()]
    if not session.save(Path(args.out)):
        console.print(f"[red]ERROR: Could not write {args.out}[/red]")
        return 1

    if changed:
        console.print(f"[yellow]Repaired: {', '.join(changed)}[/yellow]")
    else:
        console.print("[green]All motors already satisfy their constraints[/green]")
    return 0


def cmd_convert(args: argparse.Namespace, config: AppConfig) -> int:
    session = open_session(Path(args.file), config)
    if session is None:
        return 1
    if not session.save(Path(args.out)):
        console.print(f"[red]ERROR: Could not write {args.out}[/red]")
        return 1
    console.print(f"[green]Wrote {args.out}[/green]")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="motionprof",
        description="motionprof - motor motion profile tools",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config (.yaml/.json, default: motionprof.yaml if present)",
    )
    p.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    info = sub.add_parser("info", help="Summarize the motors in a document")
    info.add_argument("file", help="Motion document (.yaml/.yml/.json)")

    export = sub.add_parser("export", help="Export sampled motor values")
    export.add_argument("file", help="Motion document")
    export.add_argument("out", help="Output file (.yaml/.yml/.json)")
    export.add_argument("--rate", type=float, default=None, help="Sample rate in Hz")
    export.add_argument("--end", type=float, default=None, help="End time in ms")
    export.add_argument("--id", default=None, help="Document id written to the output")

    repair = sub.add_parser("repair", help="Clamp nodes to range and slope limits")
    repair.add_argument("file", help="Motion document")
    repair.add_argument("out", help="Output file")

    convert = sub.add_parser("convert", help="Re-save a document in another format")
    convert.add_argument("file", help="Motion document")
    convert.add_argument("out", help="Output file")

    return p


COMMANDS = {
    "info": cmd_info,
    "export": cmd_export,
    "repair": cmd_repair,
    "convert": cmd_convert,
}


def run(argv: list[str] | None = None) -> int:
    """Parse argv and run the selected command; returns the exit code."""
    args = build_arg_parser().parse_args(argv)

    if args.config is not None and not Path(args.config).exists():
        console.print(f"[red]ERROR: Config file not found: {args.config}[/red]")
        return 1

    try:
        config = load_app_config(args.config)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Invalid config: {e}[/red]")
        return 1

    configure_logging(
        level=args.log_level or config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
    logger.debug(f"Running {args.cmd} with config {args.config or 'defaults'}")
    return COMMANDS[args.cmd](args, config)


def main() -> None:
    """Main entry point for CLI."""
    sys.exit(run())
