#!/usr/bin/env python3
"""Ballot Scenario Runner.

Inputs:
- scenario json (see lunchvote.api.models.scenario)

Outputs:
- report json: one record per step (return value or error class), the
  final snapshot, and the finalization details

Notes:
- Configuration starts from BallotConfig.from_environment(), or from a named
  preset with --preset; the scenario may override voting_window_ticks and
  count_reregistrations.
- Every log line of a replay carries the ballot_id and the scenario path.
- An invalid scenario document is logged and exits with status 2.
- Failed steps do not stop the replay; later steps still run.

Usage:
    python scripts/run_ballot_scenario.py --scenario lunch.json --out report.json
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from lunchvote.api.models.ballot import BallotSnapshotResponse
from lunchvote.api.models.scenario import BallotScenario, ScenarioStep
from lunchvote.application.services.ballot_engine import BallotEngine
from lunchvote.config.ballot_config import (
    DEFAULT_BALLOT_CONFIG,
    ORIGINAL_COUNTING_BALLOT_CONFIG,
    SHORT_WINDOW_BALLOT_CONFIG,
    BallotConfig,
)
from lunchvote.domain.errors.ballot import BallotError
from lunchvote.infrastructure.monitoring.ballot_metrics import (
    BallotMetricsCollector,
    get_ballot_metrics_collector,
)
from lunchvote.infrastructure.observability import (
    ballot_log_context,
    configure_structlog,
)

CONFIG_PRESETS: dict[str, BallotConfig] = {
    "default": DEFAULT_BALLOT_CONFIG,
    "original-counting": ORIGINAL_COUNTING_BALLOT_CONFIG,
    "short-window": SHORT_WINDOW_BALLOT_CONFIG,
}


def load_scenario(path: Path) -> BallotScenario:
    return BallotScenario.model_validate_json(path.read_text(encoding="utf-8"))


def save_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def build_engine(
    scenario: BallotScenario,
    base_config: BallotConfig | None = None,
    metrics: BallotMetricsCollector | None = None,
) -> BallotEngine:
    """Create the engine a scenario describes.

    Args:
        scenario: Parsed scenario.
        base_config: Config the scenario overrides are applied to.
        metrics: Optional metrics collector handed to the engine.

    Returns:
        A fresh engine in PLANNING.
    """
    config = base_config or BallotConfig.from_environment()
    overrides: dict[str, Any] = {}
    if scenario.voting_window_ticks is not None:
        overrides["voting_window_ticks"] = scenario.voting_window_ticks
    if scenario.count_reregistrations is not None:
        overrides["count_reregistrations"] = scenario.count_reregistrations
    if overrides:
        config = replace(config, **overrides)
    return BallotEngine(scenario.coordinator, config=config, metrics=metrics)


def apply_step(engine: BallotEngine, index: int, step: ScenarioStep) -> dict[str, Any]:
    """Invoke one step and describe its outcome.

    Returns:
        Record with the step, the phase afterwards and either ``returned``
        or ``error``/``message``.
    """
    record: dict[str, Any] = {
        "index": index,
        "op": step.op,
        "caller": step.caller,
        "now": step.now,
    }
    operation = getattr(engine, step.op)
    try:
        record["returned"] = operation(step.caller, step.now, *step.arguments())
    except (BallotError, ValueError) as exc:
        record["error"] = type(exc).__name__
        record["message"] = str(exc)
        structlog.get_logger().info(
            "scenario_step_failed", index=index, op=step.op, error=record["error"]
        )
    record["phase"] = engine.current_phase().value
    return record


def run_scenario(
    scenario: BallotScenario,
    base_config: BallotConfig | None = None,
    metrics: BallotMetricsCollector | None = None,
    **log_context: Any,
) -> dict[str, Any]:
    """Replay every step of a scenario against a new engine.

    Log lines emitted during the replay carry the engine's ballot_id and
    any ``log_context`` given.

    Returns:
        Report with ``steps``, ``snapshot``, ``phase`` and ``result``.
    """
    engine = build_engine(scenario, base_config, metrics)
    with ballot_log_context(engine.ballot_id, **log_context):
        steps = [apply_step(engine, i, step) for i, step in enumerate(scenario.steps)]
        structlog.get_logger().info(
            "scenario_replayed",
            steps=len(steps),
            phase=engine.current_phase().value,
        )

    snapshot = BallotSnapshotResponse.from_snapshot(
        engine.snapshot(), engine.finalization()
    )
    return {
        "ballot_id": engine.ballot_id,
        "steps": steps,
        "phase": engine.current_phase().value,
        "result": engine.result(),
        "snapshot": snapshot.model_dump(mode="json"),
    }


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Ballot Scenario Runner - replay caller steps against a ballot engine"
    )
    p.add_argument("--scenario", required=True, help="Path to scenario json")
    p.add_argument("--out", help="Report path (default: print to stdout)")
    p.add_argument(
        "--metrics-out",
        help="Write Prometheus text exposition of the run to this path",
    )
    p.add_argument(
        "--environment",
        choices=["production", "development"],
        default="development",
        help="Log output mode",
    )
    p.add_argument(
        "--preset",
        choices=sorted(CONFIG_PRESETS),
        help="Start from a named config instead of the environment",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_structlog(environment=args.environment)

    try:
        scenario = load_scenario(Path(args.scenario))
    except ValidationError as exc:
        structlog.get_logger().error(
            "scenario_invalid",
            scenario=args.scenario,
            error_count=exc.error_count(),
            message=str(exc),
        )
        return 2

    base_config = CONFIG_PRESETS[args.preset] if args.preset else None
    metrics = get_ballot_metrics_collector()
    report = run_scenario(scenario, base_config, metrics, scenario_path=args.scenario)

    if args.out:
        save_json(Path(args.out), report)
    else:
        print(json.dumps(report, indent=2, sort_keys=True))

    if args.metrics_out:
        metrics_path = Path(args.metrics_out)
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        metrics_path.write_bytes(metrics.generate_metrics())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
