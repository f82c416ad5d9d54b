#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import dataclasses
import json
import os
from typing import TYPE_CHECKING, Any

from bucketform.credentials import CredentialProvider

from .logging import get_logger
from .utils import deep_merge_dict, query_json

if TYPE_CHECKING:
    from collections.abc import Mapping

    from bucketform.credentials import Credentials

_logger = get_logger(__name__)

_DEFAULT_BASE_URL = "https://api.bitbucket.org/"


class CredentialResolver:
    def __init__(self, config: BucketformConfig) -> None:
        self._config = config
        self._credential_providers: dict[str, CredentialProvider] = {}

    def _get_credential_provider(self, provider_type: str) -> CredentialProvider | None:
        provider = self._credential_providers.get(provider_type)
        if provider is None:
            provider = CredentialProvider.create(
                provider_type, query_json(f"defaults.{provider_type}", self._config.configuration) or {}
            )
            if provider is not None:
                self._credential_providers[provider_type] = provider

        return provider

    def get_credentials(self) -> Credentials:
        credential_data = self._config.credential_data
        provider_type = credential_data.get("provider")

        if provider_type is None:
            provider_type = self._config.default_credential_provider

        if not provider_type:
            raise RuntimeError("no credential provider configured")

        provider = self._get_credential_provider(provider_type)
        if provider is not None:
            return provider.get_credentials(credential_data)
        else:
            raise RuntimeError(f"unsupported credential provider '{provider_type}'")


@dataclasses.dataclass(frozen=True)
class BucketformConfig:
    configuration: Mapping[str, Any]
    working_dir: str

    _base_url: str = dataclasses.field(init=False)
    _default_credential_provider: str = dataclasses.field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "_base_url", query_json("defaults.base_url", self.configuration) or _DEFAULT_BASE_URL)
        object.__setattr__(
            self, "_default_credential_provider", query_json("defaults.credentials.provider", self.configuration) or ""
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def default_credential_provider(self) -> str:
        return self._default_credential_provider

    @property
    def credential_data(self) -> Mapping[str, Any]:
        return self.configuration.get("credentials") or {}

    def get_credentials(self) -> Credentials:
        return CredentialResolver(self).get_credentials()

    @classmethod
    def from_file(cls, config_file: str, working_dir: str | None = None) -> BucketformConfig:
        if not os.path.exists(config_file):
            raise RuntimeError(f"configuration file '{config_file}' not found")

        config_file_file = os.path.realpath(config_file)
        config_file_dir = os.path.dirname(config_file_file)

        try:
            with open(config_file_file) as f:
                configuration = json.load(f)
        except json.JSONDecodeError as ex:
            raise RuntimeError(f"failed to parse json file '{config_file}': {ex}") from ex

        override_defaults_file = os.path.join(config_file_dir, ".bucketform-defaults.json")
        if os.path.exists(override_defaults_file):
            with open(override_defaults_file) as defaults_file:
                defaults = json.load(defaults_file)
                _logger.trace("loading default overrides from '%s'", override_defaults_file)
                configuration["defaults"] = deep_merge_dict(defaults, configuration.setdefault("defaults", {}))

        return cls(configuration, working_dir if working_dir is not None else config_file_dir)

    @classmethod
    def from_dict(cls, configuration: Mapping[str, Any], working_dir: str) -> BucketformConfig:
        return cls(configuration, working_dir)
