import json
from typing import Any, Callable, Tuple

import click

from lazycollection.json_path import JsonPath


def parse_value(raw_value: str) -> Any:
    """ Parse the value as JSON if possible, otherwise use it as a string """
    try:
        return json.loads(raw_value)
    except ValueError:
        return raw_value


def split_condition(condition: str) -> Tuple[str, Any]:
    if '=' not in condition:
        raise click.BadParameter(f'Expected PATH=VALUE but got "{condition}".')

    path, raw_value = condition.split('=', 1)

    if not path:
        raise click.BadParameter(f'The property path is missing in "{condition}".')

    return path, parse_value(raw_value)


def property_equals(condition: str) -> Callable[[Any], bool]:
    """ Build a predicate from PATH=VALUE """
    path, expected_value = split_condition(condition)

    def predicate(record: Any) -> bool:
        actual_value = JsonPath.get(record, path)
        if actual_value == expected_value:
            return True
        # Compare as strings, e.g., "--where id=0012" against {"id": "0012"}.
        return actual_value is not None and str(actual_value) == str(expected_value)

    return predicate


def property_of(path: str) -> Callable[[Any], Any]:
    def getter(record: Any) -> Any:
        return JsonPath.get(record, path)

    return getter
