#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

from .requester import Requester

if TYPE_CHECKING:
    from bucketform.providers.bitbucket.auth import AuthStrategy
    from bucketform.providers.bitbucket.stats import RequestStatistics


class RestApi:
    # request paths carry the API version themselves, e.g. "2.0/repositories"
    _BB_API_URL_ROOT = "https://api.bitbucket.org/"

    def __init__(
        self,
        auth_strategy: AuthStrategy | None = None,
        base_url: str | None = None,
    ):
        self._auth_strategy = auth_strategy
        self._requester = Requester(auth_strategy, base_url if base_url is not None else self._BB_API_URL_ROOT)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exception_type, exception_value, exception_traceback):
        await self.close()

    @property
    def statistics(self) -> RequestStatistics:
        return self._requester.statistics

    async def close(self) -> None:
        await self._requester.close()

    @property
    def requester(self) -> Requester:
        return self._requester

    @cached_property
    def repo(self):
        from .repo_client import RepoClient

        return RepoClient(self)


class RestClient:
    def __init__(self, rest_api: RestApi):
        self.__rest_api = rest_api

    @property
    def requester(self) -> Requester:
        return self.__rest_api.requester
