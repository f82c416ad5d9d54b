#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

import asyncio
import json
import os
import sys
from typing import Any

import click

from bucketform.logging import CONSOLE_STDOUT, init_logging, print_error, print_exception, print_info

from . import __version__
from .config import BucketformConfig
from .providers.bitbucket import BitbucketProvider
from .resource import ResourceData, ResourceDescriptor
from .resource_repository import load_repository, repo_slug_of, resource_repository
from .utils import unwrap

_CONFIG_FILE = "bucketform.json"
_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"], "max_content_width": 120}

_CONFIG: BucketformConfig | None = None


class StdCommand(click.Command):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.context_settings = _CONTEXT_SETTINGS
        self.params.insert(
            0,
            click.Option(
                ["-v", "--verbose"],
                count=True,
                help="enable verbose output (-vvv for more verbose output)",
            ),
        )

        self.params.insert(
            0,
            click.Option(
                ["-c", "--config"],
                default=_CONFIG_FILE,
                show_default=True,
                type=click.Path(False, True, False),
                help="configuration file to use",
            ),
        )

    def invoke(self, ctx: click.Context) -> Any:
        global _CONFIG

        verbose = ctx.params.pop("verbose")
        init_logging(verbose)

        config_file = ctx.params.pop("config")

        try:
            _CONFIG = BucketformConfig.from_file(config_file)
        except Exception as exc:
            print_exception(exc)
            sys.exit(2)

        return super().invoke(ctx)


@click.group(context_settings=_CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="bucketform")
def cli():
    """
    Managing Bitbucket repositories as code.
    """


@cli.command(cls=StdCommand)
@click.argument("resource_file", type=click.Path(True, True, False))
def validate(resource_file: str):
    """
    Validates the configuration of a repository.
    """
    descriptor = resource_repository()

    try:
        d = _load_resource_data(descriptor, resource_file)
        repo = load_repository(d)
    except Exception as exc:
        print_exception(exc)
        sys.exit(2)

    print_info(f"{repo.get_model_header()} is valid")


@cli.command(name="import", cls=StdCommand)
@click.argument("identity")
def import_(identity: str):
    """
    Imports an existing repository, identified by OWNER/SLUG, and prints its state.
    """
    descriptor = resource_repository()
    d = descriptor.new_resource_data(id=identity)

    async def _import(provider: BitbucketProvider) -> bool:
        return await unwrap(descriptor.importer)(d, provider)

    if _execute_operation(_import) is True:
        _print_state(d)
    else:
        print_error(f"repository '{identity}' not found")
        sys.exit(1)


@cli.command(cls=StdCommand)
@click.argument("resource_file", type=click.Path(True, True, False))
def apply(resource_file: str):
    """
    Creates or updates a repository and prints its resulting state.
    """
    descriptor = resource_repository()

    try:
        d = _load_resource_data(descriptor, resource_file)
        load_repository(d)
    except Exception as exc:
        print_exception(exc)
        sys.exit(2)

    async def _apply(provider: BitbucketProvider) -> None:
        existing = await provider.get_repo(d.get("owner"), repo_slug_of(d))
        if existing is None:
            await descriptor.create(d, provider)
        else:
            d.set_id(f"{d.get('owner')}/{repo_slug_of(d)}")
            await descriptor.update(d, provider)

    _execute_operation(_apply)
    _print_state(d)


@cli.command(cls=StdCommand)
@click.argument("resource_file", type=click.Path(True, True, False))
def delete(resource_file: str):
    """
    Deletes a repository.
    """
    descriptor = resource_repository()

    try:
        d = _load_resource_data(descriptor, resource_file)
    except Exception as exc:
        print_exception(exc)
        sys.exit(2)

    _execute_operation(lambda provider: descriptor.delete(d, provider))
    print_info(f"deleted repository '{d.get('owner')}/{repo_slug_of(d)}'")


def _load_resource_data(descriptor: ResourceDescriptor, resource_file: str) -> ResourceData:
    if not os.path.exists(resource_file):
        raise RuntimeError(f"resource file '{resource_file}' not found")

    try:
        with open(resource_file) as f:
            config = json.load(f)
    except json.JSONDecodeError as ex:
        raise RuntimeError(f"failed to parse json file '{resource_file}': {ex}") from ex

    return descriptor.new_resource_data(config)


def _print_state(d: ResourceData) -> None:
    CONSOLE_STDOUT.print_json(json.dumps({"id": d.id, "state": d.to_dict()}))


def _execute_operation(operation) -> Any:
    config = unwrap(_CONFIG)

    async def _run() -> Any:
        async with BitbucketProvider(config.get_credentials(), config.base_url) as provider:
            result = await operation(provider)

            statistics = provider.rest_api.statistics
            print_info(f"sent {statistics.total_requests} requests, {statistics.failed_requests} failed")
            return result

    try:
        return asyncio.run(_run())
    except Exception as exc:
        print_exception(exc)
        sys.exit(1)


if __name__ == "__main__":
    cli()
