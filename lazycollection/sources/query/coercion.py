import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from lazycollection.common.logger import get_logger
from lazycollection.exceptions import DataConversionError
from lazycollection.sources.query.models import ColumnInfo

_logger = get_logger('lazycollection/coercion')

_BOOLEAN_TOKENS: Dict[str, bool] = {
    'true': True,
    't': True,
    'false': False,
    'f': False,
}


@dataclass(frozen=True)
class ValueMapper:
    str_pattern: re.Pattern
    map: Callable[[str], Any]

    @classmethod
    def init(cls,
             str_pattern: re.Pattern,
             map: Callable[[str], Any]):
        return cls(str_pattern, map)

    def can_handle(self, content: str) -> bool:
        return self.str_pattern.match(content) is not None


@dataclass(frozen=True)
class ValueMapperGroup:
    type_names: List[str]
    mappers: List[ValueMapper]

    def can_handle(self, type_name: str) -> bool:
        return type_name in self.type_names

    def __str__(self):
        return f'{type(self).__name__}(type_names={self.type_names})'


class ColumnCoercer:
    """
    Convert the text representation of column values into Python values, based on the column type.

    Null values, non-text values and the columns of unsupported types are left untouched. The text which does not
    match the expected lexical form of the type is also left untouched, except for booleans where any unknown token
    becomes None.
    """
    _mapper_groups: Iterable[ValueMapperGroup] = [
        # integers
        ValueMapperGroup(
            ['int2', 'int4'],
            [
                ValueMapper.init(
                    re.compile(r'^\s*[-+]?\d+\s*$'),
                    lambda s: int(s)
                )
            ]
        ),
        # double precision
        ValueMapperGroup(
            ['float8'],
            [
                ValueMapper.init(
                    re.compile(r'^\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?\s*$'),
                    lambda s: float(s)
                ),
                ValueMapper.init(
                    re.compile(r'^\s*[-+]?(NaN|Infinity)\s*$'),
                    lambda s: float(s)
                ),
            ]
        ),
        # fixed-width character
        ValueMapperGroup(
            ['bpchar'],
            [
                ValueMapper.init(
                    re.compile(r'.*', re.DOTALL),
                    lambda s: s.strip()
                )
            ]
        ),
        # json
        ValueMapperGroup(
            ['json'],
            [
                ValueMapper.init(
                    re.compile(r'.*', re.DOTALL),
                    lambda s: json.loads(s)
                )
            ]
        ),
        # boolean
        ValueMapperGroup(
            ['bool'],
            [
                ValueMapper.init(
                    re.compile(r'.*', re.DOTALL),
                    lambda s: _BOOLEAN_TOKENS.get(s)
                )
            ]
        ),
    ]

    def __init__(self, columns: Sequence[ColumnInfo]):
        self.__columns = list(columns)
        self.__column_mapper_groups = [self.find_mapper_group(column.type_name) for column in self.__columns]

    @property
    def columns(self) -> List[ColumnInfo]:
        return list(self.__columns)

    @classmethod
    def find_mapper_group(cls, type_name: str) -> Optional[ValueMapperGroup]:
        for mapper_group in cls._mapper_groups:
            if mapper_group.can_handle(type_name):
                return mapper_group
        return None

    def coerce_row(self, row: Sequence[Any]) -> Dict[str, Any]:
        if len(row) != len(self.__columns):
            raise DataConversionError(f'Expected {len(self.__columns)} value(s) in a row but got {len(row)}.')

        return {
            column.name: self._remap_value(mapper_group, value)
            for column, mapper_group, value in zip(self.__columns, self.__column_mapper_groups, row)
        }

    @classmethod
    def coerce(cls, type_name: str, value: Any) -> Any:
        """ Convert one value of the given column type """
        return cls._remap_value(cls.find_mapper_group(type_name), value)

    @staticmethod
    def _remap_value(mapper_group: Optional[ValueMapperGroup], value: Any) -> Any:
        if value is None or mapper_group is None:
            return value

        if not isinstance(value, str):
            # The driver has already converted the value.
            return value

        mapper_index = 0
        for mapper in mapper_group.mappers:
            if not mapper.can_handle(value):
                mapper_index += 1
                continue

            try:
                return mapper.map(value)
            except Exception as e:
                raise DataConversionError(f'{mapper_group}#{mapper_index}: Unexpected error during data '
                                          f'conversion with {mapper.str_pattern.pattern}') from e

        _logger.debug(f'{mapper_group}: No mapper for {value!r}. The original value is used.')

        return value
