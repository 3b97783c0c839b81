"""
Owner and player commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, get_library, standard_command
from ..output import emit


def _emit_names(names, pretty):
    emit([{'username': name} for name in names], pretty=pretty)


@click.group('owner')
def owner_cmd():
    """Manage project owners."""
    pass


@owner_cmd.command('list')
@click.argument('project')
@add_common_options('pretty')
@standard_command
def list_owners(project, pretty):
    """List the owners of PROJECT."""
    _emit_names(get_library().roles.owners(project), pretty)


@owner_cmd.command('add')
@click.argument('project')
@click.argument('usernames', nargs=-1, required=True)
@add_common_options('acting_user', 'pretty')
@standard_command
def add_owners(project, usernames, acting_user, pretty):
    """Make USERNAMES owners of PROJECT."""
    _emit_names(get_library().grant_owner(project, usernames, acting_user), pretty)


@owner_cmd.command('remove')
@click.argument('project')
@click.argument('usernames', nargs=-1, required=True)
@add_common_options('acting_user', 'pretty')
@standard_command
def remove_owners(project, usernames, acting_user, pretty):
    """Remove USERNAMES from the owners of PROJECT.

    Fails without removing anyone if no owner would remain.
    """
    _emit_names(get_library().revoke_owner(project, usernames, acting_user), pretty)


@click.group('player')
def player_cmd():
    """Manage project players (users register themselves)."""
    pass


@player_cmd.command('list')
@click.argument('project')
@add_common_options('pretty')
@standard_command
def list_players(project, pretty):
    """List the players of PROJECT."""
    _emit_names(get_library().roles.players(project), pretty)


@player_cmd.command('add')
@click.argument('project')
@add_common_options('acting_user', 'pretty')
@standard_command
def add_player(project, acting_user, pretty):
    """Register the acting user as a player of PROJECT."""
    _emit_names(get_library().grant_player(project, acting_user, acting_user), pretty)


@player_cmd.command('remove')
@click.argument('project')
@add_common_options('acting_user', 'pretty')
@standard_command
def remove_player(project, acting_user, pretty):
    """Remove the acting user from the players of PROJECT."""
    _emit_names(get_library().revoke_player(project, acting_user, acting_user), pretty)
