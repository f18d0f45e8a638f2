from lazycollection.pipeline.collection import LazyCollection
from lazycollection.pipeline.engine import ExecutionEngine, ExecutionStats
from lazycollection.pipeline.operations import Filter, Map, Operation, Sort
from lazycollection.pipeline.planner import Barrier, Block, ExecutionStage, compile_plan
