from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from lazycollection.exceptions import InvalidLimitError
from lazycollection.pipeline.engine import ExecutionEngine, ExecutionStats
from lazycollection.pipeline.operations import Filter, Map, Operation, Sort, negate
from lazycollection.pipeline.planner import ExecutionStage, compile_plan
from lazycollection.sources.base import DataSource, as_source

K = TypeVar('K')

_engine = ExecutionEngine()
_no_seed = object()


def _validate_limit(limit: Any) -> Optional[int]:
    if limit is None:
        return None

    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidLimitError(f'The limit must be a non-negative integer, got {type(limit).__name__} ({limit!r}).')

    if limit < 0:
        raise InvalidLimitError(f'The limit must be a non-negative integer, got {limit}.')

    return limit


def compare_by(key: Callable[[Any], Any], reverse: bool = False) -> Callable[[Any, Any], int]:
    """ Build a comparator from a key function """
    def comparator(a: Any, b: Any) -> int:
        key_a = key(a)
        key_b = key(b)
        order = (key_a > key_b) - (key_a < key_b)
        return -order if reverse else order

    return comparator


class LazyCollection:
    """
    Lazy Collection

    An immutable handle of a data source, a queue of pending operations and an optional result-size limit. Chaining
    calls (map, filter, reject, sort, take) return a new collection without executing anything. Terminal calls compile
    the queue and run it against the source.

    .. note:: A collection backed by a stateful cursor (e.g., a query result) can only be executed once unless the
              cursor can replay its records.
    """

    def __init__(self,
                 data: Any,
                 queue: Iterable[Operation] = tuple(),
                 limit: Optional[int] = None):
        self.__source = as_source(data)
        self.__queue: Tuple[Operation, ...] = tuple(queue)
        self.__limit = _validate_limit(limit)

    @classmethod
    def of(cls, *items: Any) -> 'LazyCollection':
        return cls(list(items))

    @property
    def source(self) -> DataSource:
        return self.__source

    @property
    def queue(self) -> Tuple[Operation, ...]:
        return self.__queue

    @property
    def limit(self) -> Optional[int]:
        return self.__limit

    def _derive(self, queue: Tuple[Operation, ...], limit: Optional[int]) -> 'LazyCollection':
        return type(self)(self.__source, queue, limit)

    def _enqueue(self, operation: Operation) -> 'LazyCollection':
        return self._derive(self.__queue + (operation,), self.__limit)

    # Chaining operations

    def map(self, transform: Callable[[Any], Any]) -> 'LazyCollection':
        return self._enqueue(Map(transform))

    def filter(self, predicate: Callable[[Any], bool]) -> 'LazyCollection':
        return self._enqueue(Filter(predicate))

    def reject(self, predicate: Callable[[Any], bool]) -> 'LazyCollection':
        return self._enqueue(Filter(negate(predicate)))

    def sort(self, comparator: Callable[[Any, Any], int]) -> 'LazyCollection':
        """ Sort with a comparator returning a negative number, zero or a positive number. The sort is stable. """
        return self._enqueue(Sort(comparator))

    def sort_by(self, key: Callable[[Any], Any], reverse: bool = False) -> 'LazyCollection':
        return self.sort(compare_by(key, reverse))

    def take(self, limit: int = 1) -> 'LazyCollection':
        """ Limit the number of elements in the result. The last call wins. """
        return self._derive(self.__queue, _validate_limit(limit))

    # Execution

    def plan(self) -> List[ExecutionStage]:
        return compile_plan(self.__queue)

    def execute(self) -> List[Any]:
        """ Execute the queue and return a new list of the result """
        return _engine.run(self.__source, compile_plan(self.__queue), self.__limit)

    def execute_with_stats(self) -> Tuple[List[Any], ExecutionStats]:
        return _engine.run_with_stats(self.__source, compile_plan(self.__queue), self.__limit)

    def to_list(self) -> List[Any]:
        return self.execute()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.execute())

    # Terminal operations

    def first(self, default: Any = None) -> Any:
        """ The first element of the result, or the default value (None) if the result is empty """
        result = self.take(1).execute()
        return result[0] if result else default

    def find(self, predicate: Callable[[Any], bool], default: Any = None) -> Any:
        return self.filter(predicate).first(default)

    def every(self, predicate: Callable[[Any], bool]) -> bool:
        for value in self.execute():
            if not predicate(value):
                return False
        return True

    def some(self, predicate: Callable[[Any], bool]) -> bool:
        for value in self.execute():
            if predicate(value):
                return True
        return False

    def reduce(self, reducer: Callable[[Any, Any], Any], seed: Any = _no_seed) -> Any:
        """
        Fold the result into one value.

        Without the seed, the first element is used as the seed and the fold starts from the second element. If the
        result is empty, the seed is returned, or None without the seed.
        """
        result = self.execute()

        if seed is _no_seed:
            if not result:
                return None
            accumulator = result[0]
            remaining = result[1:]
        else:
            accumulator = seed
            remaining = result

        for value in remaining:
            accumulator = reducer(accumulator, value)

        return accumulator

    def group_by(self, key: Callable[[Any], K]) -> Dict[K, List[Any]]:
        """ Group the elements by key. Keys and values keep the order of the first encounter. """
        groups: Dict[K, List[Any]] = dict()

        for value in self.execute():
            group_key = key(value)
            if group_key not in groups:
                groups[group_key] = list()
            groups[group_key].append(value)

        return groups

    def index_by(self, key: Callable[[Any], K]) -> Dict[K, Any]:
        """ Index the elements by key. The last element with the same key wins. """
        index: Dict[K, Any] = dict()

        for value in self.execute():
            index[key(value)] = value

        return index

    def each(self, callback: Callable[[Any], Any]) -> 'LazyCollection':
        """ Run the callback for every element and return this collection """
        for value in self.execute():
            callback(value)

        return self

    def count(self) -> int:
        """ The number of elements in the result """
        return len(self.execute())

    def source_size(self) -> Optional[int]:
        """ The number of records in the source if known without iteration """
        return self.__source.size()

    def __repr__(self):
        return f'{type(self).__name__}(source={self.__source!r}, queue={len(self.__queue)}, limit={self.__limit})'
