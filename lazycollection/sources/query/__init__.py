from lazycollection.sources.query.coercion import ColumnCoercer
from lazycollection.sources.query.handles import BufferedResult, DbApiCursorResult, ResultClosedError, ResultHandle
from lazycollection.sources.query.models import ColumnInfo, POSTGRES_TYPE_NAMES
from lazycollection.sources.query.source import QueryResultLoader, QueryResultSource
