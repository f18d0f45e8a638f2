from lazycollection.constants import __version__
from lazycollection.exceptions import DataConversionError, InvalidLimitError, InvalidSourceError, \
    SourceBusyError, SourceDepletedError, UnsupportedOperationError
from lazycollection.pipeline import Barrier, Block, ExecutionEngine, ExecutionStats, Filter, LazyCollection, Map, \
    Operation, Sort, compile_plan
from lazycollection.sources import CollectionSource, CursorSource, DataSource, IterableLoader, ResultLoader, \
    SequenceSource, as_source
from lazycollection.sources.query import BufferedResult, ColumnInfo, DbApiCursorResult, QueryResultSource, \
    ResultHandle
