"""
User commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, get_library, standard_command
from ..output import emit, emit_one


@click.group('user')
def user_cmd():
    """Manage user identities."""
    pass


@user_cmd.command('add')
@click.argument('username')
@add_common_options('pretty')
@standard_command
def add_user(username, pretty):
    """Register a new username."""
    emit_one(get_library().create_user(username), pretty=pretty)


@user_cmd.command('show')
@click.argument('username')
@add_common_options('pretty')
@standard_command
def show_user(username, pretty):
    """Show a user."""
    emit_one(get_library().get_user(username), pretty=pretty)


@user_cmd.command('list')
@add_common_options('pretty')
@standard_command
def list_users(pretty):
    """List all users."""
    emit(get_library().identity.list_users(), pretty=pretty)
