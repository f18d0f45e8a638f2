from functools import cmp_to_key
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from lazycollection.common.logger import get_logger_for
from lazycollection.pipeline.operations import Filter
from lazycollection.pipeline.planner import Barrier, Block, ExecutionStage
from lazycollection.sources.base import DataSource


class ExecutionStats(BaseModel):
    """ Statistics of one execution """
    stage_count: int = 0
    pulled: List[int] = Field(default_factory=list)
    early_terminated: bool = False
    truncated: bool = False
    result_size: int = 0


class ExecutionEngine:
    """
    Execution Engine

    Run the compiled stages against a data source. Every run allocates a new result list. The engine does not keep any
    state between runs.
    """

    def __init__(self):
        self._logger = get_logger_for(self)

    def run(self, source: DataSource, stages: Sequence[ExecutionStage], limit: Optional[int] = None) -> List[Any]:
        result, __ = self.run_with_stats(source, stages, limit)
        return result

    def run_with_stats(self,
                       source: DataSource,
                       stages: Sequence[ExecutionStage],
                       limit: Optional[int] = None) -> Tuple[List[Any], ExecutionStats]:
        stats = ExecutionStats(stage_count=len(stages))
        current: Iterable[Any] = source
        last_index = len(stages) - 1

        for index, stage in enumerate(stages):
            is_last = index == last_index

            try:
                if isinstance(stage, Block):
                    current, pulled, early_terminated = self._run_block(current,
                                                                        stage,
                                                                        limit if is_last else None)
                    stats.pulled.append(pulled)
                    stats.early_terminated = stats.early_terminated or early_terminated

                    self._logger.debug(f'Stage #{index}: Block/{len(stage.operations)}: '
                                       f'pulled {pulled}, emitted {len(current)}'
                                       + (' (early termination)' if early_terminated else ''))
                elif isinstance(stage, Barrier):
                    current = sorted(current, key=cmp_to_key(stage.comparator))
                    self._logger.debug(f'Stage #{index}: Barrier: sorted {len(current)}')
                else:
                    raise TypeError(f'Unknown execution stage: {stage!r}')
            except Exception as e:
                self._logger.debug(f'Stage #{index}: Aborted due to {type(e).__name__}')
                raise

        if current is source or not isinstance(current, list):
            # Only possible with an empty stage list.
            current = list(current)

        if limit is not None and len(current) > limit:
            current = current[:limit]
            stats.truncated = True

        stats.result_size = len(current)

        return current, stats

    @staticmethod
    def _run_block(records: Iterable[Any], block: Block, limit: Optional[int]) -> Tuple[List[Any], int, bool]:
        result: List[Any] = []
        pulled = 0

        if limit is not None and limit <= 0:
            return result, pulled, True

        iterator = iter(records)

        try:
            for record in iterator:
                pulled += 1
                value = record

                for operation in block.operations:
                    if isinstance(operation, Filter):
                        if not operation.predicate(value):
                            break
                    else:
                        value = operation.transform(value)
                else:
                    result.append(value)

                    if limit is not None and len(result) >= limit:
                        return result, pulled, True
        finally:
            close = getattr(iterator, 'close', None)
            if close:
                close()

        return result, pulled, False
