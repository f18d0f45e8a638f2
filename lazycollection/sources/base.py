from abc import ABC
from collections.abc import Collection, Iterable, Iterator as IteratorType, Sequence
from typing import Any, Iterator, Optional

from lazycollection.exceptions import InvalidSourceError


class DataSource(ABC):
    """
    Data Source

    The minimal capability required by the execution engine: an ordered sequence of records which can be iterated
    forward at least once. Replayable sources can be iterated any number of times with the same result.
    """

    def __iter__(self) -> Iterator[Any]:
        raise NotImplementedError()

    def size(self) -> Optional[int]:
        """ The number of records if known without iteration, otherwise None """
        return None

    @property
    def replayable(self) -> bool:
        return False


def as_source(data: Any) -> DataSource:
    """ Wrap the given data with the matching data source """
    # Avoid the circular import.
    from lazycollection.pipeline.collection import LazyCollection
    from lazycollection.sources.cursor import CursorSource, IterableLoader, ResultLoader
    from lazycollection.sources.memory import CollectionSource, SequenceSource

    if isinstance(data, DataSource):
        return data
    elif isinstance(data, Sequence):
        return SequenceSource(data)
    elif isinstance(data, ResultLoader):
        return CursorSource(data)
    elif isinstance(data, LazyCollection):
        # Each pass runs the wrapped pipeline again.
        return CollectionSource(data, replayable=data.source.replayable)
    elif isinstance(data, Collection) and not isinstance(data, IteratorType):
        return CollectionSource(data)
    elif isinstance(data, Iterable):
        return CursorSource(IterableLoader(data))
    else:
        raise InvalidSourceError(f'Unable to use {type(data).__name__} as a data source as it is not iterable.')
