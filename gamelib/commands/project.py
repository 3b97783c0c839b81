"""
Project and revision commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, get_library, standard_command
from ..database import PROJECT_SORT_COLUMNS
from ..domain import ProjectData, ProjectDataPatch
from ..output import emit, emit_one
from ..services.project_service import MAX_PAGE_SIZE


def _metadata_options(func):
    """Options shared by project create and project revise."""
    options = [
        click.option('--description', default=None, help='Project description'),
        click.option('--title', 'game_title', default=None, help='Game title'),
        click.option('--sort-key', 'game_title_sort', default=None,
                     help='Sortable title (derived from the title if omitted)'),
        click.option('--publisher', 'game_publisher', default=None, help='Game publisher'),
        click.option('--year', 'game_year', default=None, help='Game year'),
        click.option('--readme-file', type=click.File('r'), default=None,
                     help='File holding the readme text ("-" for stdin)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group('project')
def project_cmd():
    """Manage projects and their revision history.

    \b
    Examples:
        gamelib project create Foo --as alice --title "The Foo Game"
        gamelib project revise Foo --as alice --year 1999
        gamelib project revision Foo 1
        gamelib project show Foo --revision 1
    """
    pass


@project_cmd.command('create')
@click.argument('name')
@add_common_options('acting_user', 'pretty')
@_metadata_options
@standard_command
def create_project(name, acting_user, pretty, description, game_title, game_title_sort,
                   game_publisher, game_year, readme_file):
    """Create a project owned by the acting user.

    Revision 1 is created as well when any metadata option is given.
    """
    fields = dict(
        description=description,
        game_title=game_title,
        game_title_sort=game_title_sort,
        game_publisher=game_publisher,
        game_year=game_year,
    )
    readme = readme_file.read() if readme_file else None
    data = None
    if readme is not None or any(v is not None for v in fields.values()):
        data = ProjectData(**{k: v for k, v in fields.items() if v is not None})

    lib = get_library()
    lib.create_project(name, acting_user, data=data, readme=readme)
    emit_one(lib.get_project(name), pretty=pretty)


@project_cmd.command('show')
@click.argument('name')
@click.option('--revision', default='latest', help='Revision number (default: latest)')
@add_common_options('pretty')
@standard_command
def show_project(name, revision, pretty):
    """Show a project with its owners, packages and releases."""
    emit_one(get_library().get_project(name, revision=revision), pretty=pretty)


@project_cmd.command('list')
@click.option('--limit', type=click.IntRange(1, MAX_PAGE_SIZE), default=None, help='Page size')
@click.option('--sort', type=click.Choice(list(PROJECT_SORT_COLUMNS)), default='name',
              show_default=True, help='Order projects by this field')
@click.option('--desc', 'descending', is_flag=True, help='Reverse the order')
@click.option('--after', default=None, help='Continue after this project name')
@click.option('--before', default=None, help='Stop before this project name')
@click.option('--last', is_flag=True, help='Show the last page')
@add_common_options('pretty')
@standard_command
def list_projects(limit, sort, descending, after, before, last, pretty):
    """List projects with their latest metadata.

    Without --pretty a final line carries the anchors of the neighbouring
    pages, when there are any.
    """
    page = get_library().list_projects(
        limit=limit, sort=sort, descending=descending,
        after=after, before=before, last=last,
    )
    emit(page.projects, pretty=pretty,
         columns=['name', 'revision', 'description', 'modified_at', 'created_at'])
    if not pretty and (page.next_after is not None or page.prev_before is not None):
        emit([{'next_after': page.next_after, 'prev_before': page.prev_before}])


@project_cmd.command('revise')
@click.argument('name')
@add_common_options('acting_user', 'pretty')
@_metadata_options
@standard_command
def revise_project(name, acting_user, pretty, description, game_title, game_title_sort,
                   game_publisher, game_year, readme_file):
    """Create a new revision changing only the given fields."""
    patch = ProjectDataPatch(
        description=description,
        game_title=game_title,
        game_title_sort=game_title_sort,
        game_publisher=game_publisher,
        game_year=game_year,
        readme=readme_file.read() if readme_file else None,
    )
    emit_one(get_library().revise_project(name, patch, acting_user), pretty=pretty)


@project_cmd.command('history')
@click.argument('name')
@add_common_options('pretty')
@standard_command
def project_history(name, pretty):
    """List a project's revisions, oldest first."""
    emit(get_library().list_revisions(name), pretty=pretty)


@project_cmd.command('revision')
@click.argument('name')
@click.argument('number', default='latest')
@add_common_options('pretty')
@standard_command
def show_revision(name, number, pretty):
    """Show revision NUMBER of a project (default: latest)."""
    emit_one(get_library().get_revision(name, number), pretty=pretty)
