"""
Command-line entry point for the screenpilot command pipeline.
"""

import argparse
import json
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from .config.pipeline_config import get_pipeline_config
from .parsing.command_parser import CommandParser, format_for_display
from .services.pipeline import CommandPipeline, PipelineStatus, StatusKind
from .tools.execution.dry_run_executor import DryRunExecutor
from .tools.execution.pyautogui_executor import PyAutoGUIExecutor
from .utils.logging.logging_config import setup_logging

console = Console()

THEME = {
    StatusKind.NOT_UNDERSTOOD: "#d29922",
    StatusKind.DISPATCHED: "#7d8590",
    StatusKind.SUCCEEDED: "#00ff88",
    StatusKind.FAILED: "#f85149",
}

ICONS = {
    StatusKind.NOT_UNDERSTOOD: "?",
    StatusKind.DISPATCHED: "→",
    StatusKind.SUCCEEDED: "✓",
    StatusKind.FAILED: "✗",
}


def print_status(status: PipelineStatus) -> None:
    """Status sink that renders pipeline steps to the console."""
    line = Text(f"  {ICONS[status.kind]} ", style=THEME[status.kind])
    line.append(status.message)
    if status.error_kind is not None:
        line.append(f" [{status.error_kind.value}]", style="#7d8590")
    console.print(line)


def _read_script(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def run(script: str, dry_run: bool = False, keep_going: bool = False) -> int:
    """
    Run a script through the pipeline.

    Args:
        script: Script text
        dry_run: Record commands instead of synthesizing input
        keep_going: Continue after a failed command

    Returns:
        Process exit code (1 if any command failed or none could run)
    """
    executor = DryRunExecutor() if dry_run else PyAutoGUIExecutor()
    pipeline = CommandPipeline(executor=executor, status_sink=print_status)
    try:
        results = pipeline.run_script(script, stop_on_failure=not keep_going)
    finally:
        pipeline.shutdown()

    failed = sum(1 for result in results if result.is_failure())
    console.print(
        f"\n  {len(results) - failed}/{len(results)} commands succeeded",
        style="#7d8590",
    )
    return 1 if failed else 0


def parse(script: str, as_json: bool = False) -> int:
    """
    Print the commands a script parses to.

    Returns:
        Process exit code
    """
    commands = CommandParser(get_pipeline_config()).parse_commands(script)
    if as_json:
        console.print_json(json.dumps([command.model_dump(mode="json") for command in commands]))
    else:
        for command in commands:
            console.print(format_for_display(command), highlight=False)
    return 0


def cli(argv: Optional[List[str]] = None) -> int:
    """CLI entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        prog="screenpilot",
        description="Run text automation scripts against the desktop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output with detailed logs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Execute a script")
    run_parser.add_argument("script", nargs="?", help="Script file (default: stdin)")
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print commands without synthesizing any input",
    )
    run_parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue after a command fails",
    )

    parse_parser = subparsers.add_parser("parse", help="Show how a script parses")
    parse_parser.add_argument("script", nargs="?", help="Script file (default: stdin)")
    parse_parser.add_argument("--json", action="store_true", help="Print JSON")

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        script = _read_script(args.script)
    except OSError as e:
        console.print(f"  [#f85149]Cannot read script: {escape(str(e))}[/]")
        return 2

    if args.command == "run":
        try:
            return run(script, dry_run=args.dry_run, keep_going=args.keep_going)
        except KeyboardInterrupt:
            console.print("\n\n  [#7d8590]Interrupted[/]")
            return 130
    return parse(script, as_json=args.json)


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
