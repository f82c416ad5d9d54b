#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any


class AuthImpl:
    @abstractmethod
    def update_headers_with_authorization(self, headers: MutableMapping[str, Any]) -> None: ...


class AuthStrategy(ABC):
    @abstractmethod
    def get_auth(self) -> AuthImpl: ...


def token_auth(api_token: str) -> AuthStrategy:
    from .token import TokenAuthStrategy

    return TokenAuthStrategy(api_token)


def basic_auth(username: str, app_password: str) -> AuthStrategy:
    from .basic import BasicAuthStrategy

    return BasicAuthStrategy(username, app_password)
