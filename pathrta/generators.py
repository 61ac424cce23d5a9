"""Synthetic multi-path task sets for testing and experiments."""

import random
from typing import List, Optional, Sequence, Tuple
import math

from pathrta.models import PathResult, TaskDescriptor, Trace
from pathrta.traces import flatten_trace

# interrupt mask values of the first eight RP2040 interrupts
DEFAULT_LABELS = tuple(str(1 << i) for i in range(8))


def uunifast(n: int, u_total: float, seed: Optional[int] = None) -> List[float]:
    """Generate task utilizations using the UUniFast algorithm.

    UUniFast generates uniformly distributed task utilizations that sum to
    the target total utilization.

    Reference:
    Bini, E., & Buttazzo, G. C. (2005). Measuring the performance of schedulability tests.
    Real-Time Systems, 30(1-2), 129-154.

    Args:
        n: Number of tasks.
        u_total: Target total utilization (should be <= n for feasibility).
        seed: Optional random seed for reproducibility.

    Returns:
        List of n utilization values that sum to approximately u_total.

    Raises:
        ValueError: If n <= 0 or u_total < 0.
    """
    if n <= 0:
        raise ValueError("Number of tasks must be positive")
    if u_total < 0:
        raise ValueError("Target utilization must be non-negative")

    rng = random.Random(seed) if seed is not None else random.Random()

    utilizations = []
    sum_u = u_total

    for i in range(1, n):
        next_sum_u = sum_u * (rng.random() ** (1.0 / (n - i)))
        utilizations.append(sum_u - next_sum_u)
        sum_u = next_sum_u

    utilizations.append(sum_u)

    return utilizations


def random_sections(
    rng: random.Random,
    start: int,
    end: int,
    labels: Sequence[str],
    depth: int = 2,
) -> Tuple[Trace, ...]:
    """Generate up to two non-overlapping critical sections within [start, end].

    Sections nest up to depth levels. A section never reuses the label of an
    enclosing section, so the events it flattens to reconstruct the same tree.
    """
    if depth <= 0 or not labels or end - start < 4:
        return ()

    count = rng.randint(0, 2)
    points = sorted(rng.sample(range(start, end + 1), 2 * count))

    sections = []
    for a, b in zip(points[::2], points[1::2]):
        label = rng.choice(labels)
        inner = random_sections(rng, a, b, [l for l in labels if l != label], depth - 1)
        sections.append(Trace(id=label, start=a, end=b, inner=inner))
    return tuple(sections)


def generate_path_results(
    wcet: int,
    num_paths: int,
    labels: Sequence[str] = DEFAULT_LABELS,
    seed: Optional[int] = None,
) -> List[PathResult]:
    """Generate execution paths whose cycle counts do not exceed wcet.

    The first path always runs for exactly wcet cycles; the others run for
    between half of it and wcet.
    """
    if num_paths <= 0:
        raise ValueError("Number of paths must be positive")
    if wcet <= 0:
        raise ValueError("WCET must be positive")

    rng = random.Random(seed) if seed is not None else random.Random()

    results = []
    for p in range(num_paths):
        max_cycles = wcet if p == 0 else rng.randint(max(1, wcet // 2), wcet)
        trace = Trace(id="path", start=0, end=max_cycles,
                      inner=random_sections(rng, 0, max_cycles, labels))
        results.append(PathResult(max_cycles=max_cycles, cycle_laps=tuple(flatten_trace(trace))))
    return results


def generate_multipath_taskset(
    n: int,
    target_utilization: float,
    paths_per_task: int = 2,
    period_min: int = 1_000,
    period_max: int = 100_000,
    labels: Sequence[str] = DEFAULT_LABELS,
    seed: Optional[int] = None,
) -> Tuple[List[TaskDescriptor], List[List[PathResult]]]:
    """Generate a random task table with several execution paths per task.

    Utilizations of the longest paths are distributed with UUniFast, periods
    are log-uniform in [period_min, period_max] and deadlines equal periods.
    Priorities are Rate Monotonic with larger numbers meaning higher priority.

    Returns:
        A tuple of (task descriptors, path results per task).

    Raises:
        ValueError: If parameters are invalid.
    """
    if period_min <= 0 or period_max <= 0 or period_min > period_max:
        raise ValueError("Invalid period range")
    if paths_per_task <= 0:
        raise ValueError("Number of paths must be positive")

    rng = random.Random(seed) if seed is not None else random.Random()
    utilizations = uunifast(n, target_utilization, seed=seed)

    periods = []
    for _ in range(n):
        periods.append(int(math.exp(rng.uniform(math.log(period_min), math.log(period_max)))))

    # shortest period gets the highest (largest) priority
    by_period = sorted(range(n), key=lambda i: periods[i])
    priorities = {index: n - rank for rank, index in enumerate(by_period)}

    tasks = []
    paths = []
    for i, u in enumerate(utilizations):
        T = periods[i]
        C = min(T, max(1, round(u * T)))
        tasks.append(TaskDescriptor(
            name=f"τ{i+1}",
            interrupt=f"IRQ_{i}",
            priority=priorities[i],
            deadline=T,
            inter_arrival=T,
        ))
        paths.append(generate_path_results(C, paths_per_task, labels, seed=rng.randrange(2**32)))

    return tasks, paths
