import weakref
from collections.abc import Sized
from itertools import islice
from logging import Logger
from threading import Lock
from typing import Any, Iterable, Iterator, List, Optional
from uuid import uuid4

from lazycollection.common.logger import get_logger
from lazycollection.exceptions import InvalidSourceError, SourceBusyError, SourceDepletedError
from lazycollection.sources.base import DataSource


class InactiveLoaderError(SourceDepletedError):
    """ Raised when the loader has ended its session """


class ResultLoader:
    """
    Result Loader

    Load the records from a stateful external cursor, one page at a time.
    """
    __uuid__: Optional[str] = None
    __logger__: Optional[Logger] = None

    @property
    def uuid(self):
        if not self.__uuid__:
            self.__uuid__ = str(uuid4())
        return self.__uuid__

    @property
    def logger(self):
        if not self.__logger__:
            self.__logger__ = get_logger(f'{type(self).__name__}/{self.uuid}')
        return self.__logger__

    @property
    def replayable(self) -> bool:
        return False

    def load(self) -> List[Any]:
        raise NotImplementedError()

    def has_more(self) -> bool:
        raise NotImplementedError()

    def rewind(self):
        """ Restart from the first record """
        raise NotImplementedError(f'{type(self).__name__} cannot replay its records.')

    def size(self) -> Optional[int]:
        return None

    def close(self):
        """ Release the external resource """


class IterableLoader(ResultLoader):
    """ Load the records from a plain iterable (e.g., a generator), one batch at a time """

    def __init__(self, iterable: Iterable[Any], batch_size: int = 1):
        if not isinstance(iterable, Iterable):
            raise InvalidSourceError(f'Expected an iterable but got {type(iterable).__name__}.')

        self.__size = len(iterable) if isinstance(iterable, Sized) else None
        self.__iterator = iter(iterable)
        self.__batch_size = max(1, batch_size)
        self.__depleted = False

    def load(self) -> List[Any]:
        if self.__depleted:
            raise InactiveLoaderError(f'{type(self).__name__}/{self.uuid} has no more records.')

        batch = list(islice(self.__iterator, self.__batch_size))

        if len(batch) < self.__batch_size:
            self.__depleted = True

        return batch

    def has_more(self) -> bool:
        return not self.__depleted

    def size(self) -> Optional[int]:
        return self.__size


class CursorSource(DataSource):
    """
    Data source backed by a stateful external cursor

    This source is single-consumer. Only one iteration can be active at a time. A source whose loader cannot replay
    can only be iterated once.
    """

    def __init__(self, loader: ResultLoader):
        if not isinstance(loader, ResultLoader):
            raise InvalidSourceError(f'Expected a result loader but got {type(loader).__name__}.')

        self.__loader = loader
        self.__consumer_lock = Lock()
        self.__started = False
        self.__finalizer = weakref.finalize(self, loader.close)

    @property
    def loader(self) -> ResultLoader:
        return self.__loader

    @property
    def replayable(self) -> bool:
        return self.__loader.replayable

    @property
    def closed(self) -> bool:
        return not self.__finalizer.alive

    def size(self) -> Optional[int]:
        return self.__loader.size()

    def close(self):
        self.__finalizer()

    def __iter__(self) -> Iterator[Any]:
        return self.__read()

    def __read(self) -> Iterator[Any]:
        if not self.__consumer_lock.acquire(blocking=False):
            raise SourceBusyError(f'{self} is being iterated by another consumer.')

        try:
            if self.__started:
                if not self.replayable:
                    raise SourceDepletedError(f'{self} has already been iterated and cannot replay its records.')

                self.__loader.logger.debug('Rewind')
                self.__loader.rewind()

            self.__started = True

            while self.__loader.has_more():
                for record in self.__loader.load():
                    yield record
        finally:
            self.__consumer_lock.release()

            if not self.replayable:
                self.close()

    def __repr__(self):
        return f'{type(self).__name__}({type(self.__loader).__name__}/{self.__loader.uuid})'
