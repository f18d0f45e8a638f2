from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Tuple, Union

from lazycollection.common.logger import get_logger
from lazycollection.exceptions import UnsupportedOperationError
from lazycollection.pipeline.operations import Filter, Map, Sort

_logger = get_logger('lazycollection/planner')


@dataclass(frozen=True)
class Block:
    """ Fused run of map/filter operations, executed in one pass """
    operations: Tuple[Union[Map, Filter], ...] = tuple()


@dataclass(frozen=True)
class Barrier:
    """ Full materialization followed by a stable sort """
    comparator: Callable[[Any, Any], int]


ExecutionStage = Union[Block, Barrier]


def compile_plan(queue: Iterable[Any]) -> List[ExecutionStage]:
    """
    Compile the operation queue into execution stages.

    The result is zero or more pairs of Block and Barrier, always terminated by exactly one Block, which may be empty.
    """
    stages: List[ExecutionStage] = []
    current_block: List[Union[Map, Filter]] = []

    for operation in queue:
        if isinstance(operation, (Map, Filter)):
            current_block.append(operation)
        elif isinstance(operation, Sort):
            stages.append(Block(tuple(current_block)))
            stages.append(Barrier(operation.comparator))
            current_block = []
        else:
            raise UnsupportedOperationError(operation)

    stages.append(Block(tuple(current_block)))

    _logger.debug(f'Compiled {len(stages)} stage(s): {describe_plan(stages)}')

    return stages


def describe_plan(stages: Iterable[ExecutionStage]) -> str:
    blocks = []

    for stage in stages:
        if isinstance(stage, Block):
            blocks.append('Block[' + ', '.join(type(o).__name__ for o in stage.operations) + ']')
        else:
            blocks.append('Barrier')

    return ' → '.join(blocks)
