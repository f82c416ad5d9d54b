#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

"""
The 'bitbucket_repository' resource.

A repository is managed as three independent remote resources: the repository itself,
its pipelines config and its branching model settings. Create and update apply them in
that order without any rollback; a failing call aborts the operation and leaves the
remote state partially applied until the next read reconciles the state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bucketform.logging import print_warn
from bucketform.models import FailureType, ValidationContext
from bucketform.models.branching_model import flatten_branching_model_settings
from bucketform.models.repository import Repository
from bucketform.resource import ResourceDescriptor, ResourceSchema
from bucketform.utils import get_logger

if TYPE_CHECKING:
    from bucketform.providers.bitbucket import BitbucketProvider
    from bucketform.resource import ResourceData

_logger = get_logger(__name__)

RESOURCE_TYPE_NAME = "bitbucket_repository"


class InvalidIdentityError(ValueError):
    def __init__(self, identity: str):
        super().__init__(f"incorrect id format '{identity}', should match 'owner/slug'")
        self.identity = identity


def parse_identity(identity: str) -> tuple[str, str]:
    parts = identity.split("/")
    if len(parts) != 2:
        raise InvalidIdentityError(identity)

    return parts[0], parts[1]


def repo_slug_of(d: ResourceData) -> str:
    slug = d.get("slug")
    return slug if slug else d.get("name")


def load_repository(d: ResourceData) -> Repository:
    """
    Builds a typed repository from the current state, raising if the configuration is invalid.
    """
    d.schema.validate(d.to_dict())

    repo = Repository.from_model_data(d.to_dict())

    context = ValidationContext()
    repo.validate(context, None)

    for message in context.failures_of_type(FailureType.WARNING):
        print_warn(message)

    if context.has_errors():
        errors = "\n".join(context.failures_of_type(FailureType.ERROR))
        raise RuntimeError(f"invalid repository configuration:\n{errors}")

    return repo


async def _apply_sub_resources(repo: Repository, provider: BitbucketProvider) -> None:
    await provider.update_pipelines_config(repo.owner, repo.repo_slug, repo.pipelines_config_to_provider())

    branching_model_settings = repo.branching_model_settings_to_provider()
    if branching_model_settings is not None:
        await provider.update_branching_model_settings(repo.owner, repo.repo_slug, branching_model_settings)


async def create_repository(d: ResourceData, provider: BitbucketProvider) -> None:
    repo = load_repository(d)
    _logger.info("creating %s", repo.get_model_header())

    await provider.add_repo(repo.owner, repo.repo_slug, repo.to_provider_data())
    d.set_id(repo.identity)

    await _apply_sub_resources(repo, provider)
    await read_repository(d, provider)


async def update_repository(d: ResourceData, provider: BitbucketProvider) -> None:
    repo = load_repository(d)
    _logger.info("updating %s", repo.get_model_header())

    # the full configuration is sent, no matter which attributes have changed
    await provider.update_repo(repo.owner, repo.repo_slug, repo.to_provider_data())
    await _apply_sub_resources(repo, provider)
    await read_repository(d, provider)


async def read_repository(d: ResourceData, provider: BitbucketProvider) -> bool:
    """
    Reads the remote state into the resource data.

    Returns False if the repository could not be retrieved, in which case the
    resource data is left untouched and no error is raised.
    """
    if d.id:
        owner, slug = parse_identity(d.id)
        if d.get("owner") != owner:
            d.set("owner", owner)
        if repo_slug_of(d) != slug:
            d.set("slug", slug)

    owner = d.get("owner")
    repo_slug = repo_slug_of(d)

    repo_data = await provider.get_repo(owner, repo_slug)
    if repo_data is None:
        _logger.debug("repository '%s/%s' not found, skipping read", owner, repo_slug)
        return False

    current = Repository.from_provider_data(repo_data)
    for key, value in current.to_model_dict().items():
        d.set(key, value)

    pipelines_config = await provider.get_pipelines_config(owner, repo_slug)
    if pipelines_config is not None:
        d.set("pipelines_enabled", pipelines_config.get("enabled") is True)

    branching_model_settings = await provider.get_branching_model_settings(owner, repo_slug)
    if branching_model_settings is not None:
        d.set("branching_model_settings", flatten_branching_model_settings(branching_model_settings))

    return True


async def delete_repository(d: ResourceData, provider: BitbucketProvider) -> None:
    # pipelines config and branching model settings are removed together with the repository
    owner = d.get("owner")
    repo_slug = repo_slug_of(d)

    _logger.info("deleting repository '%s/%s'", owner, repo_slug)
    await provider.delete_repo(owner, repo_slug)


async def import_repository(d: ResourceData, provider: BitbucketProvider) -> bool:
    """
    Imports an existing repository solely based on the id of the resource data.
    """
    parse_identity(d.id)
    return await read_repository(d, provider)


def resource_repository() -> ResourceDescriptor:
    return ResourceDescriptor(
        type_name=RESOURCE_TYPE_NAME,
        schema=ResourceSchema.load("repository"),
        create=create_repository,
        read=read_repository,
        update=update_repository,
        delete=delete_repository,
        importer=import_repository,
    )
