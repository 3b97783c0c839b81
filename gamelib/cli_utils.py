"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps

from .api import GameLibrary
from .config import load_config
from .errors import GameLibError
from .exit_codes import INTERRUPTED, CommandError, get_exit_code_for_exception
from .output import emit_error


def standard_command(func):
    """
    Decorator that provides standard CLI error behavior:
    - gamelib errors go to stderr as JSON with their ``type``
    - the process exits with the error's own exit code
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            emit_error("Interrupted by user", type="interrupted")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except GameLibError as e:
            error = e.to_dict()
            emit_error(error['error'], type=error['type'],
                       context={'retryable': True} if e.retryable else None)
            sys.exit(get_exit_code_for_exception(e))
        except CommandError as e:
            emit_error(str(e), type=type(e).__name__)
            sys.exit(e.exit_code)

    return wrapper


def get_library() -> GameLibrary:
    """Build the library from the merged configuration of this invocation."""
    ctx = click.get_current_context(silent=True)
    config = None
    if ctx is not None:
        root = ctx.find_root()
        if isinstance(root.obj, dict):
            config = root.obj.get('config')
    if config is None:
        config = load_config()
    return GameLibrary(config=config)


# Standard options that many commands share
common_options = {
    'pretty': click.option('--pretty', is_flag=True,
                           help='Render a table instead of JSONL'),
    'acting_user': click.option('--as', 'acting_user', required=True, metavar='USER',
                                help='Username performing the operation'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('pretty', 'acting_user')
        def my_command(pretty, acting_user):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
