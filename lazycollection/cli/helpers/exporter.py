import datetime
from decimal import Decimal
from json import dumps
from typing import Any, Optional, Type

import yaml
from pydantic import BaseModel

from lazycollection.pipeline.collection import LazyCollection


class ConversionError(RuntimeError):
    """ Raised when the data conversion fails """


def normalize(content: Any, map_decimal: Type = str, sort_keys: bool = True) -> Any:
    """
    Normalize the content for data export

    .. note:: This is not designed for two-way data conversion.
    """
    if isinstance(content, Decimal):
        return map_decimal(content)
    elif isinstance(content, BaseModel):
        return normalize(dict(content), map_decimal=map_decimal, sort_keys=sort_keys)
    elif isinstance(content, dict):
        properties = sorted(content.keys(), key=str) if sort_keys else list(content.keys())

        return {
            p_name: normalize(content[p_name], map_decimal=map_decimal, sort_keys=sort_keys)
            for p_name in properties
        }
    elif isinstance(content, (tuple, list, set, LazyCollection)):
        # Handle a list or tuple or set or anything iterable
        return [normalize(i, map_decimal=map_decimal, sort_keys=sort_keys) for i in content]
    elif isinstance(content, (datetime.datetime, datetime.date, datetime.time)):
        return content.isoformat()
    else:
        return content


def to_json(content: Any, indent: Optional[int] = 2):
    try:
        return dumps(content, indent=indent)
    except Exception:
        raise ConversionError(f'Failed to convert:\n\n{content}\n\nas JSON string')


def to_yaml(content: Any, indent: Optional[int] = 2):
    try:
        return yaml.dump(content, Dumper=yaml.SafeDumper, indent=indent, sort_keys=False)
    except Exception:
        raise ConversionError(f'Failed to convert:\n\n{content}\n\nas YAML string')
