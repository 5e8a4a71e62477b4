"""Render assignments and team summaries for stdout, CSV and JSON."""

from __future__ import annotations

import csv
from dataclasses import asdict
from io import StringIO
from typing import Any, Dict, List, Mapping, Sequence

from teambalance.ingest.players import LoadReport
from teambalance.models import TeamSummary


ASSIGNMENT_HEADER = ("player_id", "new_team")


def assignment_lines(assignment: Mapping[int, int]) -> List[str]:
    lines = [",".join(ASSIGNMENT_HEADER)]
    for player_id in sorted(assignment):
        lines.append(f"{player_id},{assignment[player_id]}")
    return lines


def summary_lines(summaries: Sequence[TeamSummary]) -> List[str]:
    lines = ["", "Team Summaries:"]
    for summary in sorted(summaries, key=lambda item: item.team_id):
        lines.append("")
        lines.append(f"Team {summary.team_id}:")
        lines.append(f"  Players: {', '.join(str(pid) for pid in summary.player_ids)}")
        lines.append(f"  Average Engagement Score: {summary.avg_score:.2f}")
        lines.append(f"  Justification: {summary.justification}")
    return lines


def render_report(assignment: Mapping[int, int], summaries: Sequence[TeamSummary]) -> str:
    """Full text report: the assignment table followed by team summaries."""

    return "\n".join(assignment_lines(assignment) + summary_lines(summaries)) + "\n"


def export_assignments_to_csv(assignment: Mapping[int, int]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(ASSIGNMENT_HEADER)
    for player_id in sorted(assignment):
        writer.writerow([player_id, assignment[player_id]])
    return buffer.getvalue()


def build_run_report(
    load_report: LoadReport,
    summaries: Sequence[TeamSummary],
    *,
    num_teams: int,
) -> Dict[str, Any]:
    return {
        "num_teams": num_teams,
        "load": asdict(load_report),
        "teams": [summary.model_dump() for summary in summaries],
    }


__all__ = [
    "ASSIGNMENT_HEADER",
    "assignment_lines",
    "build_run_report",
    "export_assignments_to_csv",
    "render_report",
    "summary_lines",
]
