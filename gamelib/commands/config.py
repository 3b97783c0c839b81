import click
import json

from ..cli_utils import standard_command
from ..config import get_config_dir, get_config_path, get_default_config, load_config, save_config
from ..exit_codes import ConfigError


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("init")
@click.option("--format", "fmt", type=click.Choice(["json", "toml", "yaml"]), default="json",
              help="File format of the new config")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@standard_command
def init_config(fmt, force):
    """Write the default configuration to ~/.gamelib/config.<format>."""
    path = get_config_dir() / f"config.{fmt}"
    if path.exists() and not force:
        raise ConfigError(f"Config already exists at {path} (use --force to overwrite)")
    saved = save_config(get_default_config(), path)
    click.echo(json.dumps({"config_path": str(saved)}))


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    Environment overrides (GAMELIB_SECTION_KEY) are included; GAMELIB_DB
    still wins over database.path when the database is opened.
    """
    if path:
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config()
    click.echo(json.dumps(config, indent=2 if pretty else None, ensure_ascii=False))
