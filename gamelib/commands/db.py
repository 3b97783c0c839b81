"""
Database commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, standard_command
from ..config import load_config
from ..database import get_database_info
from ..output import emit_one


@click.group('db')
def db_cmd():
    """Database inspection commands."""
    pass


@db_cmd.command('info')
@add_common_options('pretty')
@standard_command
def db_info(pretty):
    """Show database location, size and record counts."""
    emit_one(get_database_info(load_config()), pretty=pretty)
