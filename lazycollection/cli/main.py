import sys
from typing import Any, List, Optional, TextIO

import click
import yaml

from lazycollection.cli.helpers.command import handle_errors
from lazycollection.cli.helpers.exporter import normalize, to_json, to_yaml
from lazycollection.cli.helpers.expressions import property_equals, property_of
from lazycollection.cli.helpers.iterator_printer import OutputFormat, show_iterator
from lazycollection.common.logger import get_logger
from lazycollection.constants import __version__
from lazycollection.pipeline.collection import LazyCollection

APP_NAME = 'lazycollection'

__python_version = str(sys.version).replace("\n", " ")
__app_signature = f'{APP_NAME} {__version__} with Python {__python_version}'

_logger = get_logger(APP_NAME)


@click.group(APP_NAME)
@click.version_option(__version__, message="%(version)s")
def lazycollection():
    """
    Lazy Collection CLI

    Run a deferred collection pipeline over a JSON or YAML array.
    """
    _logger.debug(__app_signature)


@lazycollection.command()
def version():
    """ Show the version of CLI/library """
    click.echo(__app_signature)


def load_records(input_file: TextIO) -> List[Any]:
    content = yaml.safe_load(input_file)

    if content is None:
        return []

    if not isinstance(content, list):
        raise click.UsageError(f'Expected an array of records but got {type(content).__name__}.')

    return content


def build_pipeline(records: List[Any],
                   where: List[str],
                   reject: List[str],
                   sort_by: Optional[str],
                   desc: bool,
                   select: Optional[str],
                   take: Optional[int]) -> LazyCollection:
    collection = LazyCollection(records)

    for condition in where:
        collection = collection.filter(property_equals(condition))

    for condition in reject:
        collection = collection.reject(property_equals(condition))

    if sort_by:
        collection = collection.sort_by(property_of(sort_by), reverse=desc)

    if select:
        collection = collection.map(property_of(select))

    if take is not None:
        collection = collection.take(take)

    return collection


def _show_value(output: str, value: Any):
    if output == OutputFormat.CSV:
        raise click.UsageError('The CSV output is only available for a list of records.')

    normalized = normalize(value, sort_keys=False)
    click.echo((to_yaml if output == OutputFormat.YAML else to_json)(normalized).rstrip('\n'))


@lazycollection.command()
@click.argument('input_file', type=click.File('r'), default='-')
@click.option('--where', 'where', multiple=True, help='Keep the records where PATH=VALUE (repeatable)')
@click.option('--reject', 'reject', multiple=True, help='Drop the records where PATH=VALUE (repeatable)')
@click.option('--sort-by', help='Sort the records by the value at the property path')
@click.option('--desc', is_flag=True, default=False, help='Sort in the descending order')
@click.option('--select', help='Replace each record with the value at the property path')
@click.option('--take', type=click.IntRange(min=0), help='The maximum number of records')
@click.option('--count', 'show_count', is_flag=True, default=False, help='Show the number of records')
@click.option('--first', 'show_first', is_flag=True, default=False, help='Show only the first record')
@click.option('--group-by', help='Group the records by the value at the property path')
@click.option('--index-by', help='Index the records by the value at the property path')
@click.option('--output', '-o',
              type=click.Choice([OutputFormat.JSON, OutputFormat.YAML, OutputFormat.CSV]),
              default=OutputFormat.DEFAULT_FOR_DATA,
              show_default=True,
              help='Output format')
@handle_errors
def run(input_file: TextIO,
        where: List[str],
        reject: List[str],
        sort_by: Optional[str],
        desc: bool,
        select: Optional[str],
        take: Optional[int],
        show_count: bool,
        show_first: bool,
        group_by: Optional[str],
        index_by: Optional[str],
        output: str):
    """ Run a pipeline over the records in the file (or stdin) """
    terminals = [t for t in [show_count, show_first, group_by, index_by] if t]
    if len(terminals) > 1:
        raise click.UsageError('Only one of --count, --first, --group-by and --index-by can be used.')

    collection = build_pipeline(load_records(input_file), list(where), list(reject), sort_by, desc, select, take)

    if show_count:
        _show_value(output, collection.count())
    elif show_first:
        _show_value(output, collection.first())
    elif group_by:
        _show_value(output, collection.group_by(property_of(group_by)))
    elif index_by:
        _show_value(output, collection.index_by(property_of(index_by)))
    else:
        show_iterator(output, collection.execute())
