"""
Release commands for gamelib.
"""

import click

from ..cli_utils import add_common_options, get_library, standard_command
from ..domain import Artifact
from ..output import emit, emit_one

RELEASE_COLUMNS = ['project', 'package', 'version', 'published_at', 'published_by',
                   'filename', 'size', 'authors']


@click.group('release')
def release_cmd():
    """Publish and look up releases.

    \b
    Examples:
        gamelib release publish Foo main 1.0.0-rc.1 --as alice \\
            --url https://example.org/foo.vmod --filename foo.vmod \\
            --size 1024 --checksum d41d8cd9 --author bob
        gamelib release latest Foo main
        gamelib release latest Foo main --pre
    """
    pass


@release_cmd.command('publish')
@click.argument('project')
@click.argument('package')
@click.argument('version')
@click.option('--url', required=True, help='Where the artifact can be downloaded')
@click.option('--filename', required=True, help='Artifact filename')
@click.option('--size', type=int, required=True, help='Artifact size in bytes')
@click.option('--checksum', required=True, help='Artifact checksum (stored as given)')
@click.option('--author', 'authors', multiple=True, help='Credited author (repeatable)')
@add_common_options('acting_user', 'pretty')
@standard_command
def publish_release(project, package, version, url, filename, size, checksum, authors,
                    acting_user, pretty):
    """Publish VERSION of PACKAGE in PROJECT."""
    artifact = Artifact(url=url, filename=filename, size=size, checksum=checksum)
    release = get_library().publish_release(
        project, package, version, artifact, acting_user, authors=authors
    )
    emit_one(release, pretty=pretty, columns=RELEASE_COLUMNS)


@release_cmd.command('list')
@click.argument('project')
@click.argument('package')
@click.option('--as-of', 'as_of', default=None,
              help='Only releases published at or before this ISO-8601 timestamp')
@add_common_options('pretty')
@standard_command
def list_releases(project, package, as_of, pretty):
    """List the releases of PACKAGE, newest first."""
    emit(get_library().list_releases(project, package, as_of=as_of),
         pretty=pretty, columns=RELEASE_COLUMNS)


@release_cmd.command('latest')
@click.argument('project')
@click.argument('package')
@click.option('--pre/--no-pre', 'include_prerelease', default=None,
              help='Consider pre-releases (default: releases.include_prerelease)')
@add_common_options('pretty')
@standard_command
def latest_release(project, package, include_prerelease, pretty):
    """Show the release of PACKAGE with the greatest version."""
    release = get_library().latest_release(project, package, include_prerelease=include_prerelease)
    emit_one(release, pretty=pretty, columns=RELEASE_COLUMNS)


@release_cmd.command('show')
@click.argument('project')
@click.argument('package')
@click.argument('version')
@add_common_options('pretty')
@standard_command
def show_release(project, package, version, pretty):
    """Show the release whose version is exactly VERSION."""
    emit_one(get_library().get_release(project, package, version),
             pretty=pretty, columns=RELEASE_COLUMNS)


@release_cmd.command('authors')
@click.argument('project')
@click.argument('package')
@click.argument('version')
@click.option('--add', 'add', multiple=True, help='Credit this user (repeatable)')
@click.option('--remove', 'remove', multiple=True, help='Remove this credit (repeatable)')
@click.option('--as', 'acting_user', default=None, metavar='USER',
              help='Username performing the change (required with --add/--remove)')
@add_common_options('pretty')
@standard_command
def release_authors(project, package, version, add, remove, acting_user, pretty):
    """List or change the authors credited on a release."""
    lib = get_library()
    if (add or remove) and not acting_user:
        raise click.UsageError("--as is required to change authors")
    if add or remove:
        lib.roles.update_authors(project, package, version, add=add, remove=remove,
                                 acting_user=acting_user)
    names = lib.roles.authors(project, package, version)
    emit([{'username': name} for name in names], pretty=pretty)
