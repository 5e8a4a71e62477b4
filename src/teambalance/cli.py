"""Command-line interface for rebalancing players into teams."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from teambalance.config import log_level
from teambalance.config_loader import ProfileError, SourceProfile
from teambalance.ingest import SourceLoadError
from teambalance.pipeline import run_pipeline
from teambalance.report import build_run_report, export_assignments_to_csv, render_report
from teambalance.teams import TeamAssignmentError, validate_team_count


logger = logging.getLogger(__name__)


class CliUsageError(ValueError):
    """Raised instead of exiting when the command line cannot be parsed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise CliUsageError(message)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = _ArgumentParser(description="Reassign players to teams balanced by engagement score")
    parser.add_argument(
        "--teams",
        default="3",
        help="Number of teams to build (default 3)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the source files (default $TEAMBALANCE_DATA_DIR or ./data)",
    )
    parser.add_argument("--players", type=Path, default=None, help="Override path to the player profile sheet")
    parser.add_argument("--actions", type=Path, default=None, help="Override path to the action log")
    parser.add_argument("--events", type=Path, default=None, help="Override path to the event log")
    parser.add_argument("--messages", type=Path, default=None, help="Override path to the message log")
    parser.add_argument("--load-profile", type=Path, default=None, help="Load source profile JSON")
    parser.add_argument("--save-profile", type=Path, default=None, help="Save source profile JSON")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to also write the player_id,new_team CSV",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write load diagnostics and team summaries as JSON",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=log_level(verbose),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _write_files(files: Sequence[Tuple[Path, str]]) -> None:
    """Write every file or none: stage each next to its target, then swap in."""

    staged: List[Tuple[Path, Path]] = []
    try:
        for path, content in files:
            tmp_path = path.with_name(f".{path.name}.tmp")
            staged.append((tmp_path, path))
            tmp_path.write_text(content, encoding="utf-8")
    except OSError:
        for tmp_path, _ in staged:
            tmp_path.unlink(missing_ok=True)
        raise
    for tmp_path, path in staged:
        os.replace(tmp_path, path)
        logger.info("Wrote %s", path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        args = _parse_args(argv)
    except CliUsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _configure_logging(args.verbose)

    try:
        num_teams = validate_team_count(args.teams)
    except TeamAssignmentError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        profile = SourceProfile.load(args.load_profile) if args.load_profile else SourceProfile()
        if args.data_dir is not None:
            profile.data_dir = str(args.data_dir)
        overrides = {
            "players": args.players,
            "actions": args.actions,
            "events": args.events,
            "messages": args.messages,
        }
        sources = profile.resolve(overrides=overrides)

        result = run_pipeline(sources, num_teams)
        text = render_report(result.assignment, result.summaries)

        files: List[Tuple[Path, str]] = []
        if args.save_profile:
            files.append((args.save_profile, profile.dumps()))
        if args.output:
            files.append((args.output, export_assignments_to_csv(result.assignment)))
        if args.report:
            payload = build_run_report(result.load_report, result.summaries, num_teams=num_teams)
            files.append((args.report, json.dumps(payload, indent=2)))
        _write_files(files)
    except (SourceLoadError, ProfileError, TeamAssignmentError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.debug("Unhandled error during run", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
