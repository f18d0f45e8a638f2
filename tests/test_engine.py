import random
from typing import Any, Iterator, List, Optional
from unittest import TestCase

from lazycollection import Barrier, Block, DataSource, ExecutionEngine, Filter, LazyCollection, Map, Sort, \
    UnsupportedOperationError, compile_plan


class CountingSource(DataSource):
    """ Count how many records have been pulled from the source """

    def __init__(self, data: List[Any]):
        self.data = data
        self.pulls = 0

    def __iter__(self) -> Iterator[Any]:
        for record in self.data:
            self.pulls += 1
            yield record

    def size(self) -> Optional[int]:
        return len(self.data)

    @property
    def replayable(self) -> bool:
        return True


def is_even(value: int) -> bool:
    return value % 2 == 0


def double(value: int) -> int:
    return value * 2


def ascending(a: int, b: int) -> int:
    return a - b


class TestPlanner(TestCase):
    def test_empty_queue(self):
        self.assertEqual([Block(tuple())], compile_plan([]))

    def test_fuse_contiguous_operations(self):
        m = Map(double)
        f = Filter(is_even)

        self.assertEqual([Block((m, f, m))], compile_plan([m, f, m]))

    def test_sort_becomes_a_barrier(self):
        m = Map(double)
        f = Filter(is_even)
        s = Sort(ascending)

        stages = compile_plan([m, s, f, s, s])

        self.assertEqual(
            [
                Block((m,)),
                Barrier(ascending),
                Block((f,)),
                Barrier(ascending),
                Block(tuple()),
                Barrier(ascending),
                Block(tuple()),
            ],
            stages
        )

    def test_plan_always_ends_with_a_block(self):
        for queue in [[], [Sort(ascending)], [Map(double), Sort(ascending)], [Sort(ascending), Filter(is_even)]]:
            stages = compile_plan(queue)
            self.assertIsInstance(stages[-1], Block)
            self.assertEqual(1 + 2 * len([o for o in queue if isinstance(o, Sort)]), len(stages))

    def test_unsupported_operation(self):
        with self.assertRaises(UnsupportedOperationError) as context:
            compile_plan([Map(double), object()])

        self.assertIsInstance(context.exception, NotImplementedError)

    def test_plan_from_collection(self):
        stages = LazyCollection([1]).map(double).sort(ascending).filter(is_even).plan()
        self.assertEqual(3, len(stages))


class TestExecutionEngine(TestCase):
    def setUp(self):
        self.engine = ExecutionEngine()

    def test_early_termination(self):
        source = CountingSource([4, 5, 3, 1, 2, 6, 8])

        result, stats = LazyCollection(source).take(3).execute_with_stats()

        self.assertEqual([4, 5, 3], result)
        self.assertEqual(3, source.pulls)
        self.assertTrue(stats.early_terminated)
        self.assertFalse(stats.truncated)

    def test_early_termination_with_filter(self):
        source = CountingSource([4, 5, 3, 1, 2, 6, 8])

        result = LazyCollection(source).reject(is_even).take(3).execute()

        self.assertEqual([5, 3, 1], result)
        # 4 (rejected), 5, 3, 1
        self.assertEqual(4, source.pulls)

    def test_early_termination_after_barrier(self):
        source = CountingSource([4, 5, 3, 1, 2])

        result, stats = LazyCollection(source).sort(ascending).map(double).take(2).execute_with_stats()

        self.assertEqual([2, 4], result)
        # The sort requires the full source.
        self.assertEqual(5, source.pulls)
        self.assertEqual([5, 2], stats.pulled)
        self.assertTrue(stats.early_terminated)

    def test_zero_limit_does_not_pull(self):
        source = CountingSource([1, 2, 3])

        self.assertEqual([], LazyCollection(source).map(double).take(0).execute())
        self.assertEqual(0, source.pulls)

    def test_no_early_termination_without_limit(self):
        source = CountingSource([1, 2, 3])

        result, stats = LazyCollection(source).map(double).execute_with_stats()

        self.assertEqual([2, 4, 6], result)
        self.assertEqual(3, source.pulls)
        self.assertFalse(stats.early_terminated)

    def test_limit_bound(self):
        data = list(range(20))
        queues = [
            [],
            [Map(double)],
            [Filter(is_even)],
            [Sort(lambda a, b: b - a)],
            [Filter(is_even), Sort(ascending)],
            [Sort(ascending), Filter(is_even), Map(double)],
        ]

        for queue in queues:
            unlimited = LazyCollection(data, queue).execute()

            for limit in [0, 1, 3, 10, 25]:
                limited = LazyCollection(data, queue, limit).execute()
                self.assertEqual(min(limit, len(unlimited)), len(limited))
                self.assertEqual(unlimited[:limit], limited)

    def test_truncation_without_stages(self):
        result, stats = self.engine.run_with_stats([1, 2, 3], [], 2)

        self.assertEqual([1, 2], result)
        self.assertTrue(stats.truncated)

    def test_fusion_equivalence(self):
        rng = random.Random(42)
        data = [rng.randint(-50, 50) for __ in range(100)]
        operations = [
            Map(double),
            Filter(is_even),
            Map(lambda x: x + 3),
            Filter(lambda x: x > 0),
            Map(lambda x: x // 2),
        ]

        fused = self.engine.run(data, [Block(tuple(operations))])

        separated = data
        for operation in operations:
            separated = self.engine.run(separated, [Block((operation,))])

        self.assertEqual(separated, fused)

    def test_filter_stops_the_block_for_the_element(self):
        visited = []

        def track(value: int) -> int:
            visited.append(value)
            return value

        result = LazyCollection([1, 2, 3, 4]).filter(is_even).map(track).execute()

        self.assertEqual([2, 4], result)
        self.assertEqual([2, 4], visited)

    def test_callback_failure_aborts_the_execution(self):
        def fail(value: int) -> int:
            raise KeyError(value)

        source = CountingSource([1, 2, 3])

        with self.assertRaises(KeyError):
            self.engine.run(source, compile_plan([Map(fail)]))

        self.assertEqual(1, source.pulls)
