#!/usr/bin/env python3
"""
Rate a single match from a JSON export of the scoreboard and print the
analysis report.

Input JSON layout (as exported by the scoreboard):
    {
      "playerA": {"rmr": 1000, "rd": 300, "name": "Kim"},
      "playerB": {"rmr": 1000, "rd": 300, "name": "Lee"},
      "team1Wins": 0,
      "team2Wins": 2,
      "isAbnormal": false,
      "pointLogs": [
        {"scorer": "A", "scoreA": 1, "scoreB": 0, "setIndex": 1,
         "timestamp": 1760000000000, "duration": 12.4},
        ...
      ]
    }

Usage:
    python scripts/evaluate_match.py match.json
    python scripts/evaluate_match.py match.json --output result.json --tie-policy side_b
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rally.config import settings
from rally.log_setup import configure_logging
from rally.rating import (
    MatchRecord,
    PlayerSnapshot,
    PointEvent,
    RatingEngine,
    RatingParams,
    log_match_report,
    lookup_tier,
)

logger = logging.getLogger("evaluate_match")


def _player(payload: dict[str, Any]) -> PlayerSnapshot:
    return PlayerSnapshot(
        rating=float(payload["rmr"]),
        deviation=float(payload["rd"]),
        display_name=str(payload.get("name", "")),
    )


def _point(payload: dict[str, Any]) -> PointEvent:
    return PointEvent(
        scorer=payload["scorer"],
        score_a=int(payload["scoreA"]),
        score_b=int(payload["scoreB"]),
        set_index=int(payload["setIndex"]),
        timestamp=int(payload["timestamp"]),
        rally_duration_seconds=float(payload["duration"]),
    )


def load_record(path: Path) -> MatchRecord:
    payload = json.loads(path.read_text(encoding="utf-8"))
    return MatchRecord(
        side_a=_player(payload["playerA"]),
        side_b=_player(payload["playerB"]),
        set_wins_a=int(payload["team1Wins"]),
        set_wins_b=int(payload["team2Wins"]),
        point_log=tuple(_point(p) for p in payload["pointLogs"]),
        was_forcibly_terminated=bool(payload.get("isAbnormal", False)),
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Rate one match and print the RMR report")
    parser.add_argument("match_file", type=Path, help="Scoreboard JSON export")
    parser.add_argument("--output", type=Path, default=None, help="Write the evaluation as JSON")
    parser.add_argument(
        "--tie-policy",
        choices=["no_change", "side_b"],
        default=None,
        help="Override the tied-sets policy from settings",
    )
    args = parser.parse_args()

    configure_logging(settings)

    params = RatingParams.from_settings(settings)
    if args.tie_policy:
        params = replace(params, tie_policy=args.tie_policy)

    try:
        record = load_record(args.match_file)
    except (OSError, KeyError, ValueError) as exc:
        logger.error("Could not load %s: %s", args.match_file, exc)
        return 1

    engine = RatingEngine(params)
    try:
        evaluation = engine.evaluate(record)
    except ValueError as exc:
        logger.error("Match not rated: %s", exc)
        return 1

    log_match_report(record, evaluation, params)
    logger.info(
        "Tiers: A %s -> %s, B %s -> %s",
        lookup_tier(evaluation.rating_a_before),
        lookup_tier(evaluation.new_rating_a),
        lookup_tier(evaluation.rating_b_before),
        lookup_tier(evaluation.new_rating_b),
    )

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(evaluation.to_dict(), indent=2) + "\n", encoding="utf-8")
        logger.info("Wrote %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
