from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from .config import PilotOptions
from .errors import MalformedCommand
from .run_lease import acquire_lease, default_owner, release_lease
from .service import WorkspacePilot


logger = logging.getLogger("workspace_pilot.cli")
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def _load_json_arg(value: str) -> Any:
    """Inline JSON, or a path to a JSON file."""
    try:
        raw = value if value.lstrip().startswith(("{", "[")) else Path(value).read_text(encoding="utf-8")
        return json.loads(raw)
    except Exception as exc:
        raise SystemExit(f"Invalid JSON: {value} ({exc})")


def _emit(result: Dict[str, Any]) -> int:
    console.print_json(data=result)
    return 0 if result.get("success") else 2


def _print_layouts(rows: List[Dict[str, Any]]) -> None:
    table = Table(title="Workspace layouts")
    for col in ("id", "name", "actions", "source", "description"):
        table.add_column(col)
    for row in rows:
        table.add_row(str(row["id"]), str(row["name"]), str(row["actionCount"]), row["source"], row["description"])
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workspace-pilot",
        description="Desktop workspace automation (safe by default: dry-run unless --live)",
    )
    parser.add_argument("--root", type=str, default=".", help="Project root holding config/ and layouts/")
    parser.add_argument("--live", action="store_true", help="Enable live OS automation (disables dry-run)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--verbose-actions", action="store_true", help="Include per-action reports in run results")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List known layouts")
    p_run = sub.add_parser("run", help="Run a layout by id")
    p_run.add_argument("layout_id")
    p_cmd = sub.add_parser("command", help="Run a free-text command")
    p_cmd.add_argument("phrase", nargs="+")
    p_save = sub.add_parser("save", help="Validate and store a layout")
    p_save.add_argument("layout_id")
    p_save.add_argument("source", help="Layout JSON file or inline JSON")
    p_test = sub.add_parser("test-action", help="Run a single action")
    p_test.add_argument("action", help="Action JSON file or inline JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    options = PilotOptions.load(Path(args.root))
    # Safe by default: dry-run unless explicitly live.
    dry_run = not bool(args.live)
    pilot = WorkspacePilot.from_options(options, dry_run=dry_run, verbose=args.verbose_actions)

    if args.cmd == "list":
        _print_layouts(pilot.list())
        return 0
    if args.cmd == "save":
        return _emit(pilot.save(args.layout_id, _load_json_arg(args.source)))

    # Everything below drives the desktop; only one run at a time.
    owner = default_owner()
    if not dry_run:
        try:
            acquired = acquire_lease(options.lease_file, owner, options.lease_stale_after_s, getattr(args, "layout_id", None))
        except OSError as exc:
            logger.error("could not write run lease", extra={"lease_file": str(options.lease_file), "error": str(exc)})
            console.print(f"Could not take the run lease: {exc}", style="red")
            return 2
        if not acquired:
            console.print("Another workspace run holds the lease; try again later.", style="red")
            return 2
    try:
        if args.cmd == "run":
            return _emit(pilot.execute(args.layout_id))
        if args.cmd == "command":
            try:
                return _emit(pilot.run_command(" ".join(args.phrase)))
            except MalformedCommand as exc:
                console.print(str(exc), style="red")
                return 2
        if args.cmd == "test-action":
            return _emit(pilot.test_action(_load_json_arg(args.action)))
    finally:
        if not dry_run:
            release_lease(options.lease_file, owner)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
