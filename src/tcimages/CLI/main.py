"""
Command Line Interface for tcimages.
"""
import json
import logging
import os
from pathlib import Path

import click
import yaml

from ..CONVERTERS.to_compose import ComposeConverter
from ..errors import TcImagesError
from ..IMAGES import IMAGES
from ..PARSERS.image_config_parser import ImageConfig, ImageConfigParser

logger = logging.getLogger(__name__)


IMAGE_OPTIONS = [
    click.option('--image', '-i', type=click.Choice(sorted(IMAGES)), default=None,
                 help='Image to describe (default: postgis, or the config file setting)'),
    click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False),
                 help='YAML image configuration file'),
    click.option('--env-file', type=click.Path(dir_okay=False),
                 help='.env file used for ${VAR} interpolation in the config file'),
    click.option('--db-name', help='Database created at startup'),
    click.option('--user', help='Bootstrap user'),
    click.option('--password', help='Bootstrap password'),
    click.option('--host-auth', is_flag=True, help='Allow connections without a password'),
    click.option('--fsync', is_flag=True, help='Enable fsync'),
    click.option('--init-sql', multiple=True, type=click.Path(dir_okay=False),
                 help='SQL script to run at startup (repeatable, runs in order)'),
]


def image_options(f):
    """
    Adds the options shared by every command that builds an image.
    """
    for option in reversed(IMAGE_OPTIONS):
        f = option(f)
    return f


def build_image(image, config_path, env_file, db_name, user, password, host_auth, fsync, init_sql):
    """
    Builds the image from an optional config file, then applies command
    line options on top of it.
    """
    if config_path:
        parser = ImageConfigParser(env_file=env_file)
        config = parser.parse(config_path)
        base_dir = os.path.dirname(os.path.abspath(config_path))
    else:
        config = ImageConfig()
        base_dir = "."

    if image:
        config = config.model_copy(update={"image": image})
    result = config.build(base_dir=base_dir)

    if db_name is not None:
        result = result.with_db_name(db_name)
    if user is not None:
        result = result.with_user(user)
    if password is not None:
        result = result.with_password(password)
    if host_auth:
        result = result.with_host_auth()
    if fsync:
        result = result.with_fsync_enabled()
    for path in init_sql:
        result = result.with_init_sql(Path(path))

    logger.debug("Built %s", result.image_ref())
    return result


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    tcimages - disposable database container descriptions for tests.

    Describes the image, environment, readiness conditions, staged files
    and command a container runtime needs to start a test database.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@image_options
@click.option('--format', '-f', 'output_format', type=click.Choice(['json', 'yaml']), default='json')
def describe(output_format, **options):
    """Print the image description."""
    try:
        descriptor = build_image(**options).describe()
    except TcImagesError as e:
        raise click.ClickException(str(e)) from e

    data = descriptor.to_dict()
    if output_format == 'yaml':
        click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(data, indent=2))


@cli.command()
@image_options
@click.option('--out', '-o', default='compose', help='Output directory')
@click.option('--service', '-s', default='db', help='Compose service name')
def convert(out, service, **options):
    """Write a docker compose file and staged init scripts."""
    try:
        image = build_image(**options)
        compose_path = ComposeConverter(image, service_name=service).convert(out)
    except TcImagesError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Compose file generated in {compose_path}")


def main():
    """
    Main entry point for the CLI.
    """
    cli()


if __name__ == '__main__':
    main()
