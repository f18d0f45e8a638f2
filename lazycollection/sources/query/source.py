from typing import Any, Dict, List, Mapping, Optional

from lazycollection.common.environments import env
from lazycollection.exceptions import InvalidSourceError
from lazycollection.sources.cursor import CursorSource, InactiveLoaderError, ResultLoader
from lazycollection.sources.query.coercion import ColumnCoercer
from lazycollection.sources.query.handles import DbApiCursorResult, ResultHandle
from lazycollection.sources.query.models import ColumnInfo

default_fetch_size: int = env('LAZYCOLLECTION_FETCH_SIZE',
                              default=100,
                              transform=int,
                              description='The number of rows fetched from a query result at a time')


class QueryResultLoader(ResultLoader):
    """ Load the rows from a query result handle as dictionaries of column names to converted values """

    def __init__(self, handle: ResultHandle, fetch_size: Optional[int] = None):
        fetch_size = default_fetch_size if fetch_size is None else fetch_size

        if fetch_size < 1:
            raise ValueError(f'The fetch size must be at least 1 (given: {fetch_size}).')

        self.__handle = handle
        self.__coercer = ColumnCoercer(handle.columns)
        self.__fetch_size = fetch_size
        self.__active = True

    @property
    def replayable(self) -> bool:
        return self.__handle.replayable

    def load(self) -> List[Dict[str, Any]]:
        if not self.__active:
            raise InactiveLoaderError(f'{type(self).__name__}/{self.uuid} has no more rows.')

        rows = self.__handle.fetch(self.__fetch_size)

        if len(rows) < self.__fetch_size:
            self.__active = False

        self.logger.debug(f'Fetched {len(rows)} row(s)')

        return [self.__coercer.coerce_row(row) for row in rows]

    def has_more(self) -> bool:
        return self.__active

    def rewind(self):
        self.__handle.rewind()
        self.__active = True

    def size(self) -> Optional[int]:
        return self.__handle.row_count

    def close(self):
        self.logger.debug('Close')
        self.__handle.close()


class QueryResultSource(CursorSource):
    """
    Data source backed by a query result

    Each record is a dictionary of column names to values, converted according to the column types. The source owns
    the result handle and closes it once a forward-only result is consumed, or when the source is discarded.
    """

    def __init__(self, handle: ResultHandle, fetch_size: Optional[int] = None):
        if not isinstance(handle, ResultHandle):
            raise InvalidSourceError(f'Expected a result handle but got {type(handle).__name__}.')

        self.__columns = handle.columns

        super(QueryResultSource, self).__init__(QueryResultLoader(handle, fetch_size))

    @classmethod
    def from_cursor(cls,
                    cursor: Any,
                    type_names: Optional[Mapping[Any, str]] = None,
                    fetch_size: Optional[int] = None) -> 'QueryResultSource':
        return cls(DbApiCursorResult(cursor, type_names), fetch_size)

    @property
    def columns(self) -> List[ColumnInfo]:
        return list(self.__columns)
