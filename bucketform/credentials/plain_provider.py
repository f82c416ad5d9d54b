#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

from typing import TYPE_CHECKING

from bucketform.credentials import CredentialProvider, Credentials

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any


class PlainVault(CredentialProvider):
    """
    A class to access credentials in clear text.

    NOTE: DO NOT USE THIS PROVIDER unless for quickly testing bucketform.
    """

    KEY_API_TOKEN = "api_token"
    KEY_USERNAME = "username"
    KEY_APP_PASSWORD = "app_password"

    def get_credentials(self, data: Mapping[str, Any]) -> Credentials:
        api_token = data.get(self.KEY_API_TOKEN)

        if api_token is not None:
            return Credentials(None, None, api_token)

        username = self._retrieve_key(self.KEY_USERNAME, data)
        app_password = self._retrieve_key(self.KEY_APP_PASSWORD, data)
        return Credentials(username, app_password, None)

    @staticmethod
    def _retrieve_key(key: str, data: Mapping[str, Any]) -> str:
        resolved_key = data.get(key)

        if resolved_key is None:
            raise RuntimeError(f"required key '{key}' not found in credential data")
        else:
            return resolved_key

    def __repr__(self):
        return "PlainVault()"
