from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from lazycollection.exceptions import InvalidSourceError
from lazycollection.sources.query.models import ColumnInfo, POSTGRES_TYPE_NAMES


class ResultClosedError(RuntimeError):
    """ Raised when the records are requested from a closed result """


class ResultHandle:
    """
    Result Handle

    The driver-level handle of a query result. The values of each row are in the same order as the columns.
    """

    @property
    def columns(self) -> List[ColumnInfo]:
        raise NotImplementedError()

    @property
    def row_count(self) -> Optional[int]:
        return None

    @property
    def replayable(self) -> bool:
        return False

    def fetch(self, size: int) -> List[Sequence[Any]]:
        """ Fetch up to the given number of rows. A shorter list means there is no more row. """
        raise NotImplementedError()

    def rewind(self):
        raise NotImplementedError(f'{type(self).__name__} cannot replay its rows.')

    def close(self):
        pass


class BufferedResult(ResultHandle):
    """ A query result which is fully buffered in memory, with the values in the text format """

    def __init__(self,
                 columns: Iterable[Union[ColumnInfo, Tuple[str, str], Dict[str, str]]],
                 rows: Sequence[Sequence[Optional[str]]]):
        self.__columns = [self.__to_column_info(c) for c in columns]
        self.__rows: Optional[Sequence[Sequence[Optional[str]]]] = rows
        self.__position = 0

    @property
    def columns(self) -> List[ColumnInfo]:
        return list(self.__columns)

    @property
    def row_count(self) -> Optional[int]:
        return len(self.__rows) if self.__rows is not None else None

    @property
    def replayable(self) -> bool:
        return True

    @property
    def closed(self) -> bool:
        return self.__rows is None

    def fetch(self, size: int) -> List[Sequence[Any]]:
        if self.__rows is None:
            raise ResultClosedError(f'{type(self).__name__} has been closed.')

        rows = list(self.__rows[self.__position:self.__position + size])
        self.__position += len(rows)

        return rows

    def rewind(self):
        self.__position = 0

    def close(self):
        self.__rows = None

    @staticmethod
    def __to_column_info(column: Union[ColumnInfo, Tuple[str, str], Dict[str, str]]) -> ColumnInfo:
        if isinstance(column, ColumnInfo):
            return column
        elif isinstance(column, Mapping):
            return ColumnInfo(**column)
        else:
            name, type_name = column
            return ColumnInfo(name=name, type_name=type_name)


class DbApiCursorResult(ResultHandle):
    """ A forward-only query result from a DB-API 2.0 cursor """

    def __init__(self, cursor: Any, type_names: Optional[Mapping[Any, str]] = None):
        if not (hasattr(cursor, 'description') and hasattr(cursor, 'fetchmany')):
            raise InvalidSourceError(f'Expected a DB-API cursor but got {type(cursor).__name__}.')

        if cursor.description is None:
            raise InvalidSourceError('The cursor has no result set.')

        actual_type_names = POSTGRES_TYPE_NAMES if type_names is None else type_names

        self.__cursor = cursor
        self.__columns = [
            ColumnInfo(name=description[0],
                       type_name=self.__resolve_type_name(actual_type_names, description[1]))
            for description in cursor.description
        ]

    @property
    def columns(self) -> List[ColumnInfo]:
        return list(self.__columns)

    @property
    def row_count(self) -> Optional[int]:
        row_count = getattr(self.__cursor, 'rowcount', -1)
        return row_count if isinstance(row_count, int) and row_count >= 0 else None

    def fetch(self, size: int) -> List[Sequence[Any]]:
        return list(self.__cursor.fetchmany(size))

    def close(self):
        self.__cursor.close()

    @staticmethod
    def __resolve_type_name(type_names: Mapping[Any, str], type_code: Any) -> str:
        if type_code is None:
            return 'unknown'

        try:
            return type_names.get(type_code) or str(type_code)
        except TypeError:
            # Unhashable type code
            return str(type_code)
