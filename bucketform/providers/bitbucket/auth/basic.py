#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from aiohttp import BasicAuth

from . import AuthImpl, AuthStrategy

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any


@dataclass(frozen=True)
class BasicAuthStrategy(AuthStrategy):
    """
    An AuthStrategy using a username together with an app password.
    """

    username: str
    app_password: str

    def get_auth(self) -> AuthImpl:
        return _BasicAuth(self.username, self.app_password)


@dataclass(frozen=True)
class _BasicAuth(AuthImpl):
    username: str
    app_password: str

    def update_headers_with_authorization(self, headers: MutableMapping[str, Any]) -> None:
        headers["Authorization"] = BasicAuth(self.username, self.app_password).encode()
