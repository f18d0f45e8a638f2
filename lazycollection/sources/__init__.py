from lazycollection.sources.base import DataSource, as_source
from lazycollection.sources.cursor import CursorSource, IterableLoader, ResultLoader
from lazycollection.sources.memory import CollectionSource, SequenceSource
