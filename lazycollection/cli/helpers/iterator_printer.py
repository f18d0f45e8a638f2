import csv
import sys
from json import dumps as to_json_string
from typing import Any, Iterable

import click
from yaml import SafeDumper, dump as to_yaml_string

from lazycollection.cli.helpers.exporter import normalize
from lazycollection.feature_flags import cli_show_list_item_index, in_interactive_shell


class OutputFormat:
    JSON = 'json'
    YAML = 'yaml'
    CSV = 'csv'

    DEFAULT_FOR_DATA = JSON


def show_iterator(output_format: str, records: Iterable[Any]) -> int:
    """ Print the records as a list in the given format and return the number of printed records """
    if output_format == OutputFormat.JSON:
        return _print_json(records)
    elif output_format == OutputFormat.YAML:
        return _print_yaml(records)
    elif output_format == OutputFormat.CSV:
        return _print_csv(records)
    else:
        raise ValueError(f'The given output format ({output_format}) is not available.')


def _indent(encoded: str) -> str:
    return '\n'.join(f'  {line}' for line in encoded.split('\n'))


def _show_index(index: int):
    if in_interactive_shell and cli_show_list_item_index:
        click.secho(f' # {index}', dim=True, err=True, nl=False)


def _print_json(records: Iterable[Any]) -> int:
    index = -1

    for index, record in enumerate(records):
        if index == 0:
            click.echo('[')
        else:
            click.echo(',', nl=False)
            _show_index(index)
            click.echo()

        click.echo(_indent(to_json_string(normalize(record), indent=2)), nl=False)

    click.echo('[]' if index < 0 else '\n]')

    return index + 1


def _print_yaml(records: Iterable[Any]) -> int:
    index = -1

    for index, record in enumerate(records):
        normalized = normalize(record)

        if isinstance(normalized, (dict, list)):
            encoded = to_yaml_string(normalized, Dumper=SafeDumper, sort_keys=False)
        else:
            # A bare scalar would come with the document end marker.
            encoded = to_json_string(normalized)

        click.echo('- ' + _indent(encoded).strip(), nl=False)
        _show_index(index)
        click.echo()

    if index < 0:
        click.echo('[]')

    return index + 1


def _print_csv(records: Iterable[Any]) -> int:
    writer = csv.writer(sys.stdout)
    headers = []
    index = -1

    for index, record in enumerate(records):
        normalized = normalize(record, sort_keys=False)

        if not isinstance(normalized, dict):
            normalized = dict(value=normalized)

        if index == 0:
            headers.extend(normalized.keys())
            writer.writerow(headers)

        writer.writerow([normalized.get(h) for h in headers])

    return index + 1
