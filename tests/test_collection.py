from typing import Any
from unittest import TestCase

from lazycollection import InvalidLimitError, LazyCollection, Map, UnsupportedOperationError


def double_integer(value: int) -> int:
    return value * 2


def increment_integer(value: int) -> int:
    return value + 1


def is_even_integer(value: int) -> bool:
    return value % 2 == 0


def integer_type(value: int) -> str:
    return 'even' if is_even_integer(value) else 'odd'


def compare_integers(a: int, b: int) -> int:
    return a - b


def sum_integers(a: int, b: int) -> int:
    return a + b


class TestLazyCollection(TestCase):
    def setUp(self):
        self.data = [4, 5, 3, 1, 2]
        self.collection = LazyCollection(self.data)

    def test_queueing(self):
        collection = self.collection.map(double_integer)
        chained = collection.map(double_integer)

        self.assertIsNot(collection, chained)
        self.assertEqual(1, len(collection.queue))
        self.assertEqual(2, len(chained.queue))
        self.assertEqual(0, len(self.collection.queue))

    def test_chaining_does_not_mutate_the_receiver(self):
        before = self.collection.execute()

        self.collection.map(double_integer).filter(is_even_integer).sort(compare_integers).take(2)

        self.assertEqual(before, self.collection.execute())
        self.assertEqual([4, 5, 3, 1, 2], self.collection.execute())

    def test_map(self):
        collection = self.collection.map(double_integer).map(increment_integer)

        self.assertEqual([9, 11, 7, 3, 5], collection.execute())

        # Validate that the chain is executed the same way consistently
        self.assertEqual([9, 11, 7, 3, 5], collection.execute())

    def test_execute_allocates_a_new_list(self):
        first_result = self.collection.execute()
        first_result.append(100)

        self.assertEqual([4, 5, 3, 1, 2], self.collection.execute())
        self.assertIsNot(self.collection.execute(), self.collection.execute())

    def test_filter(self):
        self.assertEqual([4, 2], self.collection.filter(is_even_integer).execute())
        self.assertEqual([8, 4], self.collection.filter(is_even_integer).map(double_integer).execute())

    def test_reject(self):
        self.assertEqual([5, 3, 1], self.collection.reject(is_even_integer).execute())
        self.assertEqual([10, 6, 2], self.collection.reject(is_even_integer).map(double_integer).execute())

    def test_take(self):
        self.assertEqual([4, 5, 3], self.collection.take(3).execute())
        self.assertEqual([5, 3, 1], self.collection.reject(is_even_integer).take(3).execute())
        self.assertEqual([8, 10, 6], self.collection.map(double_integer).take(3).execute())
        self.assertEqual([4], self.collection.take().execute())
        self.assertEqual([], self.collection.take(0).execute())
        self.assertEqual([4, 5, 3, 1, 2], self.collection.take(10).execute())

    def test_take_is_not_an_operation(self):
        collection = self.collection.map(double_integer).take(2)

        self.assertEqual(1, len(collection.queue))
        self.assertEqual(2, collection.limit)

    def test_take_last_call_wins(self):
        self.assertEqual([4, 5, 3, 1], self.collection.take(1).take(4).execute())
        self.assertEqual([4], self.collection.take(4).take(1).execute())

    def test_take_rejects_invalid_limit(self):
        for invalid_limit in [-1, 1.5, '3', True]:
            with self.assertRaises(InvalidLimitError):
                self.collection.take(invalid_limit)

    def test_sort(self):
        self.assertEqual([1, 2, 3, 4, 5], self.collection.sort(compare_integers).execute())
        self.assertEqual([2, 4, 6, 8, 10], self.collection.map(double_integer).sort(compare_integers).execute())
        self.assertEqual([1, 2], self.collection.sort(compare_integers).take(2).execute())

    def test_sort_is_stable(self):
        records = [('b', 1), ('a', 2), ('b', 3), ('a', 4), ('c', 5), ('a', 6)]

        result = LazyCollection(records).sort(lambda x, y: (x[0] > y[0]) - (x[0] < y[0])).execute()

        self.assertEqual([('a', 2), ('a', 4), ('a', 6), ('b', 1), ('b', 3), ('c', 5)], result)

    def test_sort_by(self):
        records = [dict(n='b', v=1), dict(n='a', v=2), dict(n='b', v=3)]

        self.assertEqual([2, 1, 3],
                         LazyCollection(records).sort_by(lambda r: r['n']).map(lambda r: r['v']).execute())
        self.assertEqual([1, 3, 2],
                         LazyCollection(records).sort_by(lambda r: r['n'], reverse=True).map(lambda r: r['v']).execute())

    def test_group_by(self):
        grouped = self.collection.group_by(integer_type)

        self.assertEqual(['odd', 'even'], list(grouped.keys()))
        self.assertEqual([5, 3, 1], grouped['odd'])
        self.assertEqual([4, 2], grouped['even'])

        grouped = self.collection.filter(is_even_integer).group_by(integer_type)
        self.assertEqual({'even': [4, 2]}, grouped)

    def test_index_by(self):
        indexed = self.collection.index_by(double_integer)

        for key, value in indexed.items():
            self.assertEqual(key, value * 2)

        # The last element with the same key wins.
        self.assertEqual({'even': 2, 'odd': 1}, self.collection.index_by(integer_type))

    def test_find(self):
        self.assertEqual(2, self.collection.find(lambda value: value == 2))
        self.assertIsNone(self.collection.find(lambda value: value == 'a'))
        self.assertEqual('missing', self.collection.find(lambda value: value == 'a', default='missing'))

    def test_iteration(self):
        count = 0

        for index, value in enumerate(self.collection.map(double_integer)):
            self.assertEqual(double_integer(self.data[index]), value)
            count += 1

        self.assertEqual(len(self.data), count)

    def test_first(self):
        self.assertEqual(4, self.collection.first())
        self.assertEqual(1, self.collection.sort(compare_integers).first())
        self.assertEqual(5, self.collection.take(3).reject(is_even_integer).first())
        self.assertIsNone(LazyCollection([]).first())

    def test_every(self):
        self.assertFalse(self.collection.every(is_even_integer))
        self.assertTrue(self.collection.every(lambda value: isinstance(value, int)))
        self.assertTrue(LazyCollection([]).every(is_even_integer))

    def test_every_short_circuits(self):
        visited = []

        def predicate(value: int) -> bool:
            visited.append(value)
            return value != 5

        self.assertFalse(self.collection.every(predicate))
        self.assertEqual([4, 5], visited)

    def test_some(self):
        self.assertTrue(self.collection.some(is_even_integer))
        self.assertFalse(self.collection.some(lambda value: value > 5))
        self.assertFalse(LazyCollection([]).some(is_even_integer))

    def test_reduce(self):
        # Validate that it will reduce the collection to a value
        self.assertEqual(15, self.collection.reduce(sum_integers, 0))

        # Validate that it will reduce a mapped collection
        self.assertEqual(30, self.collection.map(double_integer).reduce(sum_integers))

        # Validate that it will reduce only a filtered collection
        self.assertEqual(6, self.collection.filter(is_even_integer).reduce(sum_integers))

    def test_reduce_without_seed_uses_the_first_element(self):
        calls = []

        def reducer(accumulator: Any, value: int) -> Any:
            calls.append((accumulator, value))
            return f'{accumulator}{value}'

        self.assertEqual('45312', self.collection.reduce(reducer))
        self.assertEqual(4, len(calls))
        self.assertEqual((4, 5), calls[0])

    def test_reduce_on_empty_result(self):
        self.assertIsNone(LazyCollection([]).reduce(sum_integers))
        self.assertEqual(0, LazyCollection([]).reduce(sum_integers, 0))
        self.assertIsNone(LazyCollection([]).reduce(sum_integers, None))

    def test_reduce_with_none_seed(self):
        self.assertEqual([None, 4, 5, 3, 1, 2],
                         self.collection.reduce(lambda acc, value: (acc if isinstance(acc, list) else [acc]) + [value],
                                                None))

    def test_each(self):
        visited = []
        collection = self.collection.each(lambda value: visited.append(value) or 'ignored')

        self.assertEqual(self.data, visited)
        self.assertIs(self.collection, collection)

    def test_count(self):
        self.assertEqual(5, self.collection.count())
        self.assertEqual(2, self.collection.filter(is_even_integer).count())
        self.assertEqual(3, self.collection.take(3).count())
        self.assertEqual(5, self.collection.filter(is_even_integer).source_size())

    def test_to_list(self):
        returned = self.collection.to_list()
        self.assertEqual(len(self.data), len(returned))

    def test_of(self):
        self.assertEqual([1, 2, 3], LazyCollection.of(1, 2, 3).execute())

    def test_constructor_with_queue(self):
        collection = LazyCollection(self.data, [Map(double_integer)], 2)
        self.assertEqual([8, 10], collection.execute())

    def test_unsupported_operation(self):
        touched = []

        def source():
            for value in self.data:
                touched.append(value)
                yield value

        collection = LazyCollection(source(), [Map(double_integer), 'reverse'])

        with self.assertRaises(UnsupportedOperationError):
            collection.execute()

        # The error is raised before any data is touched.
        self.assertEqual([], touched)

    def test_callback_failure_propagates(self):
        class ExpectedError(RuntimeError):
            pass

        def explode(value: int) -> int:
            if value == 3:
                raise ExpectedError(value)
            return value

        collection = self.collection.map(explode)

        with self.assertRaises(ExpectedError):
            collection.execute()

        with self.assertRaises(ExpectedError):
            self.collection.sort(lambda a, b: explode(a) - explode(b)).execute()

        # The original collection is still usable.
        self.assertEqual([4, 5, 3, 1, 2], self.collection.execute())
