from __future__ import annotations

import argparse
import json
import logging
import tempfile
from pathlib import Path

from workspace_pilot import PilotOptions, WorkspacePilot


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="workspace_pilot demo (dry-run against throwaway stores)")
    parser.add_argument("--layout", default="meeting", help="Default layout to run (dev, research, meeting)")
    parser.add_argument("--command", default="dark mode", help="Free-text command to run afterwards")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    _setup_logging(args.verbose)

    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        opts = PilotOptions(
            user_store=root / "home" / "workspace-layouts.json",
            layouts_dir=root / "layouts",
            action_log=root / "logs" / "actions.jsonl",
        )
        pilot = WorkspacePilot.from_options(opts, dry_run=True, verbose=True)
        recorder = pilot.backend.drivers[0]

        out = {
            "layout": pilot.execute(args.layout),
            "command": pilot.run_command(args.command),
            "calls": [[cap, list(call_args)] for cap, call_args in recorder.calls],
        }
        print(json.dumps(out, indent=2, sort_keys=True))
        return 0 if out["layout"]["success"] else 2


if __name__ == "__main__":
    raise SystemExit(main())
