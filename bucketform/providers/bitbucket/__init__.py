#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import contextlib
from asyncio import CancelledError
from typing import TYPE_CHECKING

from bucketform.utils import get_logger, unwrap

if TYPE_CHECKING:
    from typing import Any

    from bucketform.credentials import Credentials
    from bucketform.providers.bitbucket.auth import AuthStrategy


_logger = get_logger(__name__)


class BitbucketProvider:
    def __init__(self, credentials: Credentials | None, base_url: str | None = None):
        self._credentials = credentials
        self._base_url = base_url

        if credentials is not None:
            self._init_clients()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exception_type, exception_value, exception_traceback):
        await self.close()

    async def close(self) -> None:
        if self._credentials is not None:
            with contextlib.suppress(CancelledError):
                await self.rest_api.close()

    def _init_clients(self):
        from .rest import RestApi

        self.rest_api = RestApi(self._get_auth_strategy(), self._base_url)

    def _get_auth_strategy(self) -> AuthStrategy:
        from bucketform.providers.bitbucket.auth import basic_auth, token_auth

        credentials = unwrap(self._credentials)

        if credentials.has_api_token():
            return token_auth(credentials.api_token)
        else:
            return basic_auth(credentials.username, credentials.app_password)

    async def get_repo(self, owner: str, repo_slug: str) -> dict[str, Any] | None:
        return await self.rest_api.repo.get_repo(owner, repo_slug)

    async def add_repo(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        await self.rest_api.repo.add_repo(owner, repo_slug, data)

    async def update_repo(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        await self.rest_api.repo.update_repo(owner, repo_slug, data)

    async def delete_repo(self, owner: str, repo_slug: str) -> None:
        await self.rest_api.repo.delete_repo(owner, repo_slug)

    async def get_pipelines_config(self, owner: str, repo_slug: str) -> dict[str, Any] | None:
        return await self.rest_api.repo.get_pipelines_config(owner, repo_slug)

    async def update_pipelines_config(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        await self.rest_api.repo.update_pipelines_config(owner, repo_slug, data)

    async def get_branching_model_settings(self, owner: str, repo_slug: str) -> dict[str, Any] | None:
        return await self.rest_api.repo.get_branching_model_settings(owner, repo_slug)

    async def update_branching_model_settings(self, owner: str, repo_slug: str, data: dict[str, Any]) -> None:
        await self.rest_api.repo.update_branching_model_settings(owner, repo_slug, data)
