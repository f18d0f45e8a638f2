from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Operation:
    """ A pending transformation request """


@dataclass(frozen=True)
class Map(Operation):
    transform: Callable[[Any], Any]


@dataclass(frozen=True)
class Filter(Operation):
    predicate: Callable[[Any], bool]


@dataclass(frozen=True)
class Sort(Operation):
    comparator: Callable[[Any, Any], int]


def negate(predicate: Callable[[Any], bool]) -> Callable[[Any], bool]:
    def rejected(value: Any) -> bool:
        return not predicate(value)

    return rejected
