"""Hand-crafted unit tests for the SRP response-time evaluator."""

import unittest

from pathrta.analysis import SrpEvaluator, resource_ceilings
from pathrta.models import TaskRecord, Trace


def make_task(name, C, T, priority, D=None, sections=()):
    return TaskRecord(
        id=name,
        priority=priority,
        deadline=D if D is not None else T,
        inter_arrival=T,
        trace=Trace(name, 0, C, tuple(sections)),
    )


class TestResponseTime(unittest.TestCase):
    """Test the response-time recurrence."""

    def setUp(self):
        self.evaluator = SrpEvaluator()

    def test_single_task(self):
        """Test that a lone task responds in its own execution time."""
        task = make_task("τ1", C=2, T=10, priority=1)
        result = self.evaluator.response_time([task])
        self.assertEqual(result[0].response_time, 2)
        self.assertEqual(result[0].blocking, 0)
        self.assertEqual(result[0].interference, 0)

    def test_two_tasks(self):
        """Test interference from a higher-priority task.

        R2 = 2 + ceil(R2/4)*1
        Iteration 0: R = 2
        Iteration 1: R = 2 + ceil(2/4)*1 = 3
        Iteration 2: R = 2 + ceil(3/4)*1 = 3 (converged)
        """
        task1 = make_task("τ1", C=1, T=4, priority=2)
        task2 = make_task("τ2", C=2, T=6, priority=1)
        result = self.evaluator.response_time([task1, task2])

        self.assertEqual(result[0].response_time, 1)
        self.assertEqual(result[1].response_time, 3)
        self.assertEqual(result[1].interference, 1)

    def test_result_order_follows_input(self):
        """Test that results keep the order of the combination."""
        task1 = make_task("τ1", C=1, T=4, priority=2)
        task2 = make_task("τ2", C=2, T=6, priority=1)
        result = self.evaluator.response_time([task2, task1])
        self.assertEqual(result.task_ids, ["τ2", "τ1"])
        self.assertEqual(result[0].response_time, 3)

    def test_lower_value_higher_priority(self):
        """Test the opposite priority convention."""
        evaluator = SrpEvaluator(higher_value_higher_priority=False)
        task1 = make_task("τ1", C=1, T=4, priority=0)
        task2 = make_task("τ2", C=2, T=6, priority=1)
        result = evaluator.response_time([task1, task2])
        self.assertEqual(result[0].response_time, 1)
        self.assertEqual(result[1].response_time, 3)

    def test_deadline_miss_is_reported(self):
        """Test that a converged response time above the deadline is kept.

        R2 = 3 + ceil(R2/5)*2 = 5 > D2 = 4, but R2 <= T2.
        """
        task1 = make_task("τ1", C=2, T=5, priority=2)
        task2 = make_task("τ2", C=3, T=10, D=4, priority=1)
        result = self.evaluator.response_time([task1, task2])
        self.assertEqual(result[1].response_time, 5)
        self.assertFalse(result[1].passed)
        self.assertTrue(result[0].passed)

    def test_overload_unresolved(self):
        """Test that a response time growing past the period is unresolved."""
        task1 = make_task("τ1", C=3, T=5, priority=2)
        task2 = make_task("τ2", C=3, T=5, priority=1)
        result = self.evaluator.response_time([task1, task2])
        self.assertEqual(result[0].response_time, 3)
        self.assertIsNone(result[1].response_time)
        self.assertFalse(result[1].passed)

    def test_max_iterations(self):
        """Test that the iteration limit yields an unresolved response time."""
        evaluator = SrpEvaluator(max_iterations=1)
        task1 = make_task("τ1", C=1, T=4, priority=2)
        task2 = make_task("τ2", C=2, T=6, priority=1)
        result = evaluator.response_time([task1, task2])
        self.assertIsNone(result[1].response_time)

    def test_total_utilization(self):
        """Test total utilization of a combination."""
        tasks = [
            make_task("τ1", C=2, T=10, priority=3),
            make_task("τ2", C=3, T=15, priority=2),
            make_task("τ3", C=4, T=20, priority=1),
        ]
        self.assertAlmostEqual(self.evaluator.total_utilization(tasks), 0.6, places=6)


class TestBlocking(unittest.TestCase):
    """Test SRP blocking through shared critical sections."""

    def setUp(self):
        self.evaluator = SrpEvaluator()

    def test_shared_resource_blocks(self):
        """Test that a lower-priority section on a shared resource blocks.

        B_hi = 10 (lo holds r for 10 cycles), R_hi = 10 + 10 = 20
        R_lo = 20 + ceil(R_lo/100)*10 = 30
        """
        hi = make_task("hi", C=10, T=100, priority=2, sections=[Trace("r", 2, 5)])
        lo = make_task("lo", C=20, T=200, priority=1, sections=[Trace("r", 5, 15)])
        result = self.evaluator.response_time([hi, lo])

        self.assertEqual(result[0].blocking, 10)
        self.assertEqual(result[0].response_time, 20)
        self.assertEqual(result[0].interference, 0)
        self.assertEqual(result[1].blocking, 0)
        self.assertEqual(result[1].response_time, 30)
        self.assertEqual(result[1].interference, 10)

    def test_private_resource_does_not_block(self):
        """Test that a resource only used by lower-priority tasks never blocks."""
        hi = make_task("hi", C=10, T=100, priority=2)
        lo = make_task("lo", C=20, T=200, priority=1, sections=[Trace("s", 5, 15)])
        result = self.evaluator.response_time([hi, lo])
        self.assertEqual(result[0].blocking, 0)
        self.assertEqual(result[0].response_time, 10)

    def test_nested_section_blocks(self):
        """Test that nested sections count with their own length."""
        hi = make_task("hi", C=10, T=100, priority=3, sections=[Trace("inner", 0, 1)])
        mid = make_task("mid", C=10, T=100, priority=2)
        lo = make_task("lo", C=50, T=500, priority=1, sections=[
            Trace("outer", 0, 40, (Trace("inner", 10, 17),)),
        ])
        result = self.evaluator.response_time([hi, mid, lo])
        self.assertEqual(result[0].blocking, 7)
        # outer is only used by lo, inner has ceiling 3 >= 2
        self.assertEqual(result[1].blocking, 7)

    def test_longest_section_chosen(self):
        """Test that the longest blocking section is taken."""
        hi = make_task("hi", C=10, T=100, priority=3, sections=[Trace("a", 0, 1), Trace("b", 2, 3)])
        lo1 = make_task("lo1", C=20, T=200, priority=2, sections=[Trace("a", 0, 4)])
        lo2 = make_task("lo2", C=20, T=200, priority=1, sections=[Trace("b", 0, 9)])
        result = self.evaluator.response_time([hi, lo1, lo2])
        self.assertEqual(result[0].blocking, 9)

    def test_resource_ceilings(self):
        """Test that ceilings are the highest priority of the users."""
        hi = make_task("hi", C=10, T=100, priority=3, sections=[Trace("a", 0, 1)])
        lo = make_task("lo", C=20, T=200, priority=1,
                       sections=[Trace("a", 0, 4), Trace("b", 5, 6)])
        ceilings = resource_ceilings([hi, lo], self.evaluator.urgency)
        self.assertEqual(ceilings, {"a": 3, "b": 1})


if __name__ == "__main__":
    unittest.main()
