import functools
from traceback import print_exc
from typing import Callable

import click

from lazycollection.feature_flags import in_global_debug_mode
from lazycollection.json_path import BrokenPropertyPathError


def _show_error(e: Exception):
    click.secho(f'{type(e).__name__}: ', fg='red', bold=True, nl=False, err=True)
    click.secho(str(e), fg='red', err=True)


def handle_errors(handler: Callable):
    """ Report the error in a short form and exit with status code 1, unless the debug mode is enabled """
    @functools.wraps(handler)
    def handle_invocation(*args, **kwargs):
        if in_global_debug_mode:
            # In the debug mode, no error will be handled gracefully so that the developers can see the full detail.
            return handler(*args, **kwargs)

        try:
            return handler(*args, **kwargs)
        except click.ClickException:
            raise
        except BrokenPropertyPathError as e:
            _show_error(e)
            raise SystemExit(1) from e
        except (AttributeError, IndexError) as e:
            click.secho('Unexpected programming error', fg='red', err=True)
            print_exc()
            raise SystemExit(1) from e
        except Exception as e:
            _show_error(e)
            raise SystemExit(1) from e

    return handle_invocation
