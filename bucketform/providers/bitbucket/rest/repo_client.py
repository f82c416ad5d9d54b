#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

import json
from typing import Any

from bucketform.providers.bitbucket.rest import RestApi, RestClient
from bucketform.utils import get_logger

_logger = get_logger(__name__)


def repo_path(owner: str, repo_slug: str) -> str:
    return f"2.0/repositories/{owner}/{repo_slug}"


class RepoClient(RestClient):
    """
    Client for a repository and its sub-resources (pipelines config, branching model settings).

    Getters return None if the resource could not be retrieved with status 200,
    any other method raises a BitbucketException for a non-2xx response.
    """

    def __init__(self, rest_api: RestApi):
        super().__init__(rest_api)

    async def get_repo(self, owner: str, repo_slug: str) -> dict[str, Any] | None:
        _logger.debug("retrieving repo data for '%s/%s'", owner, repo_slug)
        return await self._get_if_present(repo_path(owner, repo_slug))

    async def add_repo(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        _logger.debug("creating repo '%s/%s'", owner, repo_slug)

        await self.requester.request_json("POST", repo_path(owner, repo_slug), data)
        _logger.debug("created repo '%s/%s'", owner, repo_slug)

    async def update_repo(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        _logger.debug("updating repo '%s/%s'", owner, repo_slug)

        await self.requester.request_json("PUT", repo_path(owner, repo_slug), data)
        _logger.debug("updated repo '%s/%s'", owner, repo_slug)

    async def delete_repo(self, owner: str, repo_slug: str) -> None:
        _logger.debug("deleting repo '%s/%s'", owner, repo_slug)

        await self.requester.request_json("DELETE", repo_path(owner, repo_slug))
        _logger.debug("removed repo '%s/%s'", owner, repo_slug)

    async def get_pipelines_config(self, owner: str, repo_slug: str) -> dict[str, Any] | None:
        _logger.debug("retrieving pipelines config for '%s/%s'", owner, repo_slug)
        return await self._get_if_present(f"{repo_path(owner, repo_slug)}/pipelines_config")

    async def update_pipelines_config(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        _logger.debug("updating pipelines config for '%s/%s'", owner, repo_slug)
        await self.requester.request_json("PUT", f"{repo_path(owner, repo_slug)}/pipelines_config", data)

    async def get_branching_model_settings(self, owner: str, repo_slug: str) -> dict[str, Any] | None:
        _logger.debug("retrieving branching model settings for '%s/%s'", owner, repo_slug)
        return await self._get_if_present(f"{repo_path(owner, repo_slug)}/branching-model/settings")

    async def update_branching_model_settings(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        _logger.debug("updating branching model settings for '%s/%s'", owner, repo_slug)
        await self.requester.request_json("PUT", f"{repo_path(owner, repo_slug)}/branching-model/settings", data)

    async def _get_if_present(self, url_path: str) -> dict[str, Any] | None:
        status, body = await self.requester.request_raw("GET", url_path)
        if status == 200:
            return json.loads(body)
        else:
            _logger.debug("'%s' returned status %d, ignoring", url_path, status)
            return None
