#!/usr/bin/env python3

import click

from gamelib import __version__
from gamelib.config import load_config, setup_logging
from gamelib.commands.config import config_cmd
from gamelib.commands.db import db_cmd
from gamelib.commands.image import image_cmd
from gamelib.commands.package import package_cmd
from gamelib.commands.project import project_cmd
from gamelib.commands.release import release_cmd
from gamelib.commands.roles import owner_cmd, player_cmd
from gamelib.commands.user import user_cmd


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx):
    """gamelib - Release and revision registry for game modules.

    Every command prints JSONL on stdout (or a table with --pretty).
    Failures print a JSON error on stderr and exit with a code specific
    to the kind of failure.
    """
    config = load_config()
    setup_logging(config)
    ctx.obj = {'config': config}


# Identity
cli.add_command(user_cmd)
cli.add_command(project_cmd)
cli.add_command(package_cmd)

# Roles
cli.add_command(owner_cmd)
cli.add_command(player_cmd)

# Releases and gallery
cli.add_command(release_cmd)
cli.add_command(image_cmd)

# Administration
cli.add_command(config_cmd)
cli.add_command(db_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
