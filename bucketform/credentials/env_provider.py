#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bucketform.credentials import CredentialProvider, Credentials
from bucketform.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

_logger = get_logger(__name__)


class EnvVault(CredentialProvider):
    """
    A class to access credentials from environment variables.

    The credential data maps each key (api_token, username, app_password) to the
    name of the environment variable holding its value. Will load .env files if available.
    """

    def __init__(
        self,
        api_token: str | None = None,
        username: str | None = None,
        app_password: str | None = None,
    ) -> None:
        super().__init__()

        # used as default env var names if no specific settings are provided.
        self._default_keys = {
            key: value
            for key, value in {
                "api_token": api_token,
                "username": username,
                "app_password": app_password,
            }.items()
            if value is not None
        }

        load_dotenv()

    def _env_variable(self, data: Mapping[str, Any], key: str) -> str | None:
        return data.get(key) or self._default_keys.get(key)

    def _env_value(self, data: Mapping[str, Any], key: str) -> str:
        env_variable = self._env_variable(data, key)
        if env_variable is None:
            raise RuntimeError(f"required key '{key}' not found in credential data")

        _logger.debug(
            "%s: retrieving from environment variable %s (%s)",
            key,
            env_variable,
            "specific setting" if key in data else "default setting",
        )

        # Note: never log env_value. It's a secret.
        env_value = os.getenv(env_variable)
        if env_value is None:
            raise RuntimeError(f"environment variable '{env_variable}' for key '{key}' not found")

        return env_value

    def get_credentials(self, data: Mapping[str, Any]) -> Credentials:
        """
        Retrieves credentials from environment variables based on the provided data mapping.

        An api token takes precedence, if none is configured username and app password are required.
        """
        if self._env_variable(data, "api_token") is not None:
            return Credentials(None, None, self._env_value(data, "api_token"))

        username = self._env_value(data, "username")
        app_password = self._env_value(data, "app_password")
        return Credentials(username, app_password, None)

    def __repr__(self) -> str:
        return "EnvVault()"
