#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import dataclasses
from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

from bucketform.logging import get_logger, print_warn

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Any

_logger = get_logger(__name__)


@dataclasses.dataclass
class Credentials:
    """
    A simple data class to hold credential information to access Bitbucket.

    Either an api token (repository, project or workspace access token) or
    a username together with an app password is required.
    """

    _username: str | None
    _app_password: str | None
    _api_token: str | None

    @property
    def username(self) -> str:
        if self._username is None:
            raise RuntimeError("username not available")
        else:
            return self._username

    @property
    def app_password(self) -> str:
        if self._app_password is None:
            raise RuntimeError("app_password not available")
        else:
            return self._app_password

    @property
    def api_token(self) -> str:
        if self._api_token is None:
            raise RuntimeError("api_token not available")
        else:
            return self._api_token

    def has_api_token(self) -> bool:
        return self._api_token is not None

    def __str__(self) -> str:
        if self._username is not None:
            return f"Credentials(username={self._username})"
        else:
            return "Credentials(api_token=***)"


class CredentialProvider(Protocol):
    @abstractmethod
    def get_credentials(self, data: Mapping[str, Any]) -> Credentials: ...

    @classmethod
    def create(cls, provider_type: str, defaults: Mapping[str, Any]) -> CredentialProvider | None:
        match provider_type:
            case "env":
                from .env_provider import EnvVault

                valid_keys = _check_valid_keys(provider_type, defaults, EnvVault.__init__)
                return EnvVault(**valid_keys)

            case "plain":
                from .plain_provider import PlainVault

                _check_valid_keys(provider_type, defaults, PlainVault.__init__)
                return PlainVault()

            case _:
                return None


def _check_valid_keys(provider_type: str, defaults: Mapping[str, Any], func: Callable) -> dict[str, Any]:
    import inspect

    result = {}
    signature = inspect.signature(func)
    for k, v in defaults.items():
        if k in signature.parameters:
            result[k] = v
        else:
            print_warn(f"found unexpected key/value pair '{k}:{v}' in defaults for provider '{provider_type}'")

    return result
