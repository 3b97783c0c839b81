"""
Package commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, get_library, standard_command
from ..output import emit, emit_one


@click.group('package')
def package_cmd():
    """Manage the packages of a project."""
    pass


@package_cmd.command('create')
@click.argument('project')
@click.argument('name')
@add_common_options('acting_user', 'pretty')
@standard_command
def create_package(project, name, acting_user, pretty):
    """Create package NAME in PROJECT."""
    emit_one(get_library().create_package(project, name, acting_user), pretty=pretty)


@package_cmd.command('list')
@click.argument('project')
@add_common_options('pretty')
@standard_command
def list_packages(project, pretty):
    """List the packages of PROJECT with their releases."""
    view = get_library().get_project(project)
    if pretty:
        emit(
            [
                {
                    'project': p.project,
                    'name': p.name,
                    'created_at': p.created_at,
                    'created_by': p.created_by,
                    'releases': [str(r.version) for r in p.releases],
                }
                for p in view.packages
            ],
            pretty=True,
        )
    else:
        emit(view.packages)
