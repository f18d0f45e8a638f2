import json
import logging
import os
from sys import stderr

from typing import Any, Callable, Optional, Set

__reported_keys: Set[str] = set()

# The logger module reads its own configuration from here, so this module has to set up its logger by hand.
__debug_mode = str(os.getenv('LAZYCOLLECTION_DEBUG') or '').lower() in ['1', 'true']
__log_handler = logging.StreamHandler(stderr)
__log_handler.setFormatter(logging.Formatter('[ %(asctime)s | %(levelname)s ] %(name)s: %(message)s'))

__env_logger = logging.Logger('environment', level=logging.DEBUG if __debug_mode else logging.INFO)
__env_logger.addHandler(__log_handler)


class InvalidEnvironmentVariableError(ValueError):
    """ Raised when the value of an environment variable cannot be parsed """

    def __init__(self, key: str, value: str, reason: str):
        super(InvalidEnvironmentVariableError, self).__init__(f'Invalid value for {key}: {value!r} ({reason})')
        self.key = key
        self.value = value


def env(key: str,
        default: Any = None,
        transform: Optional[Callable[[str], Any]] = None,
        description: Optional[str] = None) -> Any:
    """ Read the environment variable, falling back to the default when it is not set """
    raw_value = os.getenv(key)

    if raw_value is None:
        value = default
    elif transform:
        try:
            value = transform(raw_value)
        except (TypeError, ValueError) as e:
            __env_logger.error(f'"{key}" ({description or "no description"}) cannot be parsed')
            raise InvalidEnvironmentVariableError(key, raw_value, str(e)) from e
    else:
        value = raw_value

    if key not in __reported_keys:
        __reported_keys.add(key)
        __env_logger.debug(f'"{key}"' + (f' ({description})' if description else '') + f' → {json.dumps(value)}')

    return value


def flag(key: str, description: Optional[str] = None) -> bool:
    return bool(env(key, default=False, transform=lambda v: v.lower() in ['1', 'true'], description=description))
