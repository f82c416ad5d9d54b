#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

import json
from typing import Any

from aiohttp import ClientSession, ClientTimeout

from bucketform.logging import is_trace_enabled
from bucketform.providers.bitbucket.auth import AuthStrategy
from bucketform.providers.bitbucket.exception import BadCredentialsException, BitbucketException
from bucketform.providers.bitbucket.stats import RequestStatistics
from bucketform.utils import get_logger

_logger = get_logger(__name__)


class Requester:
    def __init__(
        self,
        auth_strategy: AuthStrategy | None,
        base_url: str,
    ):
        self._auth = auth_strategy.get_auth() if auth_strategy is not None else None

        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        self._statistics = RequestStatistics()

        # all request paths are relative, e.g. '2.0/repositories/...'
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._session: ClientSession | None = None

    @property
    def statistics(self) -> RequestStatistics:
        return self._statistics

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> ClientSession:
        # the session needs to be created within a running event loop
        if self._session is None:
            self._session = ClientSession(timeout=ClientTimeout(connect=3, sock_connect=3))
        return self._session

    def _build_url(self, url_path: str) -> str:
        return f"{self._base_url}{url_path.lstrip('/')}"

    async def request_json(
        self,
        method: str,
        url_path: str,
        data: dict[str, Any] | None = None,
    ) -> Any:
        input_data = None
        if data is not None:
            input_data = json.dumps(data)

        status, body = await self.request_raw(method, url_path, input_data)
        self.check_response(url_path, status, body)
        json_result = json.loads(body) if len(body) > 0 else None
        if is_trace_enabled():
            _logger.trace("'%s' url = %s, json = %s", method, url_path, json.dumps(json_result, indent=2))
        return json_result

    async def request_raw(
        self,
        method: str,
        url_path: str,
        data: str | None = None,
    ) -> tuple[int, str]:
        _logger.trace("'%s' url = %s, data = %s", method, url_path, data)

        headers = self._headers.copy()
        if self._auth is not None:
            self._auth.update_headers_with_authorization(headers)

        url = self._build_url(url_path)
        async with self._get_session().request(
            method,
            url=url,
            headers=headers,
            data=data,
        ) as response:
            self._statistics.sent_request()

            text = await response.text()
            status = response.status

            if status >= 400:
                self._statistics.received_failed_response()

            _logger.trace("'%s' url = %s, result = (%d)", method, url_path, status)
            return status, text

    def check_response(self, url_path: str, status_code: int, body: str) -> None:
        if status_code < 200 or status_code >= 300:
            self._create_exception(self._build_url(url_path), status_code, body)

    @staticmethod
    def _create_exception(url: str, status_code: int, body: str):
        if status_code == 401:
            raise BadCredentialsException(url, body)
        else:
            raise BitbucketException(url, status_code, body)
