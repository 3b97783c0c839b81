"""
Image gallery commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, get_library, standard_command
from ..output import emit, emit_one


@click.group('image')
def image_cmd():
    """Manage a project's image gallery."""
    pass


@image_cmd.command('add')
@click.argument('project')
@click.argument('filename')
@click.argument('url')
@add_common_options('acting_user', 'pretty')
@standard_command
def add_image(project, filename, url, acting_user, pretty):
    """Record image FILENAME of PROJECT at URL."""
    emit_one(get_library().publish_image(project, filename, url, acting_user), pretty=pretty)


@image_cmd.command('show')
@click.argument('project')
@click.argument('filename')
@add_common_options('pretty')
@standard_command
def show_image(project, filename, pretty):
    """Show image FILENAME of PROJECT."""
    emit_one(get_library().get_image(project, filename), pretty=pretty)


@image_cmd.command('list')
@click.argument('project')
@add_common_options('pretty')
@standard_command
def list_images(project, pretty):
    """List the images of PROJECT."""
    emit(get_library().projects.list_images(project), pretty=pretty)
