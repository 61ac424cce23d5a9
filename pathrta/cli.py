from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pathrta.analysis import SrpEvaluator
from pathrta.config import load_config, parse_config
from pathrta.errors import AnalysisError, ConfigError, UnresolvedResponseTime
from pathrta.pipeline import analyze
from pathrta.report import format_combination, format_report, format_traces


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pathrta", description="Worst-case response times over all execution paths"
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    sub = p.add_subparsers(dest="cmd", required=True)

    an = sub.add_parser("analyze", help="Analyze a task set described in YAML")
    an.add_argument("config", type=Path)
    an.add_argument("--workers", type=_non_negative, default=None)
    an.add_argument(
        "--max-combinations",
        type=_non_negative,
        default=None,
        help="Refuse to enumerate more task set combinations than this",
    )
    an.add_argument("--list-combinations", action="store_true")
    an.add_argument("--show-traces", action="store_true")
    an.add_argument("--breakdown", action="store_true",
                    help="Show wcet, blocking and interference per task")
    return p


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.cmd == "analyze":
        try:
            config = parse_config(load_config(args.config))
        except (OSError, ConfigError) as e:
            print(f"Invalid configuration: {e}")
            return 2

        print("Simple WCET analysis")
        evaluator = SrpEvaluator(
            higher_value_higher_priority=config.higher_value_higher_priority
        )
        max_combinations = (
            args.max_combinations if args.max_combinations is not None else config.max_combinations
        )
        workers = args.workers if args.workers is not None else config.workers

        try:
            outcome = analyze(
                config.tasks,
                config.paths,
                evaluator=evaluator,
                max_combinations=max_combinations,
                workers=workers,
            )
        except UnresolvedResponseTime as e:
            for task_id, index in e.unresolved:
                print(f"Task: {task_id}, combination {index}, [UNRESOLVED]")
            return 2
        except AnalysisError as e:
            print(f"Analysis failed: {e}")
            return 2

        print(f"expected: {outcome.expected}")
        print(f"gotten: {len(outcome.combinations)}")
        if args.list_combinations:
            for i, combination in enumerate(outcome.combinations):
                print(format_combination(i, combination))
        if args.show_traces:
            for line in format_traces(outcome.combinations):
                print(line)
        for line in format_report(outcome.report, outcome.max_utilization, args.breakdown):
            print(line)

        return 0 if outcome.report.schedulable else 1

    raise AssertionError(f"Unhandled command: {args.cmd}")
