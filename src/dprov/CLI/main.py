# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command Line Interface for DPROV.
"""
import logging
import sys

import click

from ..errors import ProvisionError
from ..MANAGERS.container_manager import ContainerManager
from ..MANAGERS.container_store import JsonContainerStore
from ..MANAGERS.container_unit import ContainerUnit
from ..MANAGERS.image_manager import ImageManager
from ..MODELS.container import App, Image
from ..PARSERS.config_parser import ConfigParser
from ..REPOSITORY.repository import Repository
from ..RUNNERS.executor import SubprocessExecutor


def _fail(e):
    click.echo(f"Error: {e}")
    sys.exit(1)


def _manager(ctx) -> ContainerManager:
    """
    Builds the container manager on first use, so commands that never touch
    the store do not create it.
    """
    if 'manager' not in ctx.obj:
        settings = ctx.obj['settings']
        try:
            store = ctx.obj.get('store') or JsonContainerStore(settings.docker.store_path)
        except ProvisionError as e:
            _fail(e)
        ctx.obj['store'] = store
        ctx.obj['manager'] = ContainerManager(settings, ctx.obj['executor'], store, ctx.obj['repository'])
    return ctx.obj['manager']


def _container(ctx, name):
    container = _manager(ctx).get(name)
    if container is None:
        _fail(f"container {name} not found.")
    return container


@click.group()
@click.option('--config', '-c', default=None, help='YAML configuration file')
@click.option('--env-file', default='.env', help='.env file with DPROV_* overrides')
@click.option('--verbose', '-v', is_flag=True, help='Log every command issued')
@click.pass_context
def cli(ctx, config, env_file, verbose):
    """
    DPROV - Docker provisioner.

    Provisions application units as containers and syncs their code.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = ConfigParser(env_file=env_file).parse(config)
    except ProvisionError as e:
        _fail(e)
    executor = ctx.obj.get('executor') or SubprocessExecutor()
    ctx.obj['settings'] = settings
    ctx.obj['executor'] = executor
    ctx.obj['repository'] = Repository(settings)
    ctx.obj['images'] = ImageManager(settings, executor)


@cli.command()
@click.argument('app')
@click.argument('type')
@click.pass_context
def create(ctx, app, type):
    """Create a container for an application."""
    try:
        container = _manager(ctx).create(App(name=app, type=type))
    except ProvisionError as e:
        _fail(e)
    if not container.created:
        _fail(f"container {app} was not created: {container.error}")
    click.echo(container.id)


@cli.command()
@click.argument('name')
@click.pass_context
def stop(ctx, name):
    """Stop an application's container."""
    container = _container(ctx, name)
    try:
        _manager(ctx).stop(container)
    except ProvisionError as e:
        _fail(e)
    click.echo(f"Container {name} stopped.")


@cli.command()
@click.argument('name')
@click.pass_context
def rm(ctx, name):
    """Remove an application's container and forget it."""
    container = _container(ctx, name)
    try:
        _manager(ctx).remove(container)
        ctx.obj['store'].delete(name)
    except ProvisionError as e:
        _fail(e)
    click.echo(f"Container {name} removed.")


@cli.command()
@click.argument('name')
@click.pass_context
def ip(ctx, name):
    """Print the IP address of an application's container."""
    container = _container(ctx, name)
    try:
        click.echo(_manager(ctx).ip(container))
    except ProvisionError as e:
        _fail(e)


@cli.command()
@click.argument('name')
@click.pass_context
def sync(ctx, name):
    """Clone or pull an application's code inside its container."""
    container = _container(ctx, name)
    try:
        unit = ContainerUnit(container, ctx.obj['executor'], ctx.obj['settings'])
        output = ctx.obj['repository'].clone_or_pull(unit)
    except ProvisionError as e:
        _fail(e)
    click.echo(output, nl=False)


@cli.command()
@click.argument('name')
@click.pass_context
def commit(ctx, name):
    """Commit an application's container into its image."""
    container = _container(ctx, name)
    images = ctx.obj['images']
    try:
        image = images.commit(Image(name=name), container.id)
    except ProvisionError as e:
        _fail(e)
    click.echo(f"{images.tag(image)} {image.id}")


@cli.command()
@click.argument('image_id')
@click.pass_context
def rmi(ctx, image_id):
    """Remove an image by id."""
    try:
        ctx.obj['images'].remove(Image(name="", id=image_id))
    except ProvisionError as e:
        _fail(e)
    click.echo(f"Image {image_id} removed.")


@cli.command()
@click.argument('app')
@click.pass_context
def urls(ctx, app):
    """Print repository locations of an application."""
    repository = ctx.obj['repository']
    try:
        click.echo(f"{'push':10} {repository.get_url(app)}")
        click.echo(f"{'clone':10} {repository.get_read_only_url(app)}")
        click.echo(f"{'bare':10} {repository.get_bare_path(app)}")
    except ProvisionError as e:
        _fail(e)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
