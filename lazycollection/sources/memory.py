from collections.abc import Iterable, Iterator as IteratorType, Sized
from typing import Any, Iterator, Optional, Sequence

from lazycollection.exceptions import InvalidSourceError
from lazycollection.sources.base import DataSource


class SequenceSource(DataSource):
    """ Data source backed by an in-memory sequence """

    def __init__(self, data: Sequence[Any]):
        if not isinstance(data, Sequence):
            raise InvalidSourceError(f'Expected a sequence but got {type(data).__name__}.')

        self.__data = data

    @property
    def data(self) -> Sequence[Any]:
        return self.__data

    def __iter__(self) -> Iterator[Any]:
        return iter(self.__data)

    def size(self) -> Optional[int]:
        return len(self.__data)

    @property
    def replayable(self) -> bool:
        return True

    def __repr__(self):
        return f'{type(self).__name__}(size={len(self.__data)})'


class CollectionSource(DataSource):
    """
    Data source backed by an in-memory collection which is not a sequence, e.g., a set, a dict or a dict view

    Every pass asks the collection for a new iterator.
    """

    def __init__(self, data: Iterable, replayable: bool = True):
        if not isinstance(data, Iterable) or isinstance(data, IteratorType):
            raise InvalidSourceError(f'Expected a re-iterable collection but got {type(data).__name__}.')

        self.__data = data
        self.__replayable = replayable

    @property
    def data(self) -> Iterable:
        return self.__data

    def __iter__(self) -> Iterator[Any]:
        return iter(self.__data)

    def size(self) -> Optional[int]:
        return len(self.__data) if isinstance(self.__data, Sized) else None

    @property
    def replayable(self) -> bool:
        return self.__replayable

    def __repr__(self):
        return f'{type(self).__name__}({type(self.__data).__name__}, size={self.size()})'
