"""Textual rendering of analysis results."""

from typing import List, Sequence

from pathrta.hooks import describe_label
from pathrta.models import Combination, TaskResult, Trace, WorstCaseReport


def format_combination(index: int, combination: Combination) -> str:
    items = "".join(f"{task.id}, " for task in combination)
    return f"list {index}: [{items}]"


def format_result(result: TaskResult) -> str:
    """Format the worst-case verdict of one task."""
    verdict = "[SUCCESS]" if result.passed else "[FAIL]"
    return (
        f"Task: {result.task.id}, max response time: {result.response_time}, "
        f"deadline: {result.task.deadline}, {verdict}"
    )


def format_breakdown(result: TaskResult) -> str:
    return (
        f"    wcet: {result.wcet}, blocking: {result.blocking}, "
        f"interference: {result.interference}"
    )


def format_report(report: WorstCaseReport, max_utilization: float,
                  breakdown: bool = False) -> List[str]:
    """Return the report lines: maximum utilization, then one verdict per task."""
    lines = [f"Max utilization: {max_utilization}"]
    for result in report:
        lines.append(format_result(result))
        if breakdown:
            lines.append(format_breakdown(result))
    return lines


def format_trace(trace: Trace, depth: int = 0) -> List[str]:
    """Render a trace tree, one interval per line, naming masked interrupts."""
    name = trace.id if depth == 0 else describe_label(trace.id)
    lines = [f"{'  ' * depth}{name} [{trace.start}, {trace.end}]"]
    for child in trace.inner:
        lines.extend(format_trace(child, depth + 1))
    return lines


def format_traces(combinations: Sequence[Combination]) -> List[str]:
    """Render every distinct path trace appearing in the combinations."""
    lines = []
    seen = set()
    for combination in combinations:
        for task in combination:
            if id(task) in seen:
                continue
            seen.add(id(task))
            lines.extend(format_trace(task.trace))
    return lines
