#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, ClassVar

from jsonbender import F, If, K, OptionalS, S  # type: ignore

from bucketform.models import FailureType, ModelObject, ValidationContext
from bucketform.utils import UNSET, is_set_and_present, is_unset

from .branching_model import BranchingModelSettings

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def _clone_url(links: Sequence[Mapping[str, Any]], https: bool) -> Any:
    # every link not named 'https' is considered to be the ssh url, the last one wins
    result = UNSET
    for link in links:
        if (link.get("name") == "https") is https:
            result = link.get("href", "")
    return result


@dataclasses.dataclass
class Repository(ModelObject):
    """
    Represents a Bitbucket repository together with its pipelines config
    and branching model settings.
    """

    owner: str
    name: str
    slug: str
    scm: str
    is_private: bool
    has_wiki: bool
    has_issues: bool
    website: str
    fork_policy: str
    language: str
    description: str
    project_key: str

    # read-only fields only populated from the provider
    uuid: str = dataclasses.field(metadata={"read_only": True})
    clone_ssh: str = dataclasses.field(metadata={"read_only": True})
    clone_https: str = dataclasses.field(metadata={"read_only": True})

    # fields maintained via separate sub-resources
    pipelines_enabled: bool = dataclasses.field(metadata={"sub_resource": True})
    branching_model_settings: BranchingModelSettings | None = dataclasses.field(
        metadata={"sub_resource": True, "embedded_model": True}
    )

    # fields that are omitted from the request body if empty / false
    _omit_if_empty: ClassVar[list[str]] = [
        "scm",
        "has_wiki",
        "has_issues",
        "website",
        "is_private",
        "fork_policy",
        "language",
        "description",
        "slug",
    ]

    @property
    def model_object_name(self) -> str:
        return "repository"

    @property
    def repo_slug(self) -> str:
        """The slug used to address the repository, defaults to its name."""
        if is_set_and_present(self.slug) and len(self.slug) > 0:
            return self.slug
        else:
            return self.name

    @property
    def identity(self) -> str:
        return f"{self.owner}/{self.repo_slug}"

    def get_model_header(self) -> str:
        return f"{self.model_object_name}[{self.owner}/{self.name}]"

    def validate(self, context: ValidationContext, parent_object: Any) -> None:
        for key in ("owner", "name"):
            value = self.__getattribute__(key)
            if not is_set_and_present(value) or len(value) == 0:
                context.add_failure(
                    FailureType.ERROR,
                    f"{self.get_model_header()} has no '{key}' defined, but it is required.",
                )

        if is_set_and_present(self.branching_model_settings):
            self.branching_model_settings.validate(context, self)

    @classmethod
    def get_mapping_from_model(cls) -> dict[str, Any]:
        mapping = super().get_mapping_from_model()

        mapping.update(
            {
                "branching_model_settings": If(
                    OptionalS("branching_model_settings", default=[]) == K([]),
                    K(None),
                    S("branching_model_settings", 0) >> F(lambda x: BranchingModelSettings.from_model_data(x)),
                ),
            }
        )

        return mapping

    @classmethod
    def get_mapping_from_provider(cls) -> dict[str, Any]:
        def slug_if_different(data: Mapping[str, Any]) -> Any:
            slug = data.get("slug", "")
            if slug and slug != data.get("name", ""):
                return slug
            else:
                return UNSET

        def project_key(data: Mapping[str, Any]) -> str:
            project = data.get("project") or {}
            return project.get("key") or ""

        def clone_links(data: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
            links = data.get("links") or {}
            return links.get("clone") or []

        # null values are treated like absent values
        mapping = {
            k: OptionalS(k, default=None) >> F(lambda x: x if x is not None else "")
            for k in ("scm", "name", "website", "language", "description")
        }

        mapping.update(
            {
                k: OptionalS(k, default=None) >> F(lambda x: x is True)
                for k in ("is_private", "has_wiki", "has_issues")
            }
        )

        mapping.update(
            {
                "owner": K(UNSET),
                "slug": F(slug_if_different),
                "project_key": F(project_key),
                "uuid": OptionalS("uuid", default=None) >> F(lambda x: x if x is not None else ""),
                "fork_policy": OptionalS("fork_policy", default=None) >> F(lambda x: x if x is not None else UNSET),
                "clone_ssh": F(lambda x: _clone_url(clone_links(x), False)),
                "clone_https": F(lambda x: _clone_url(clone_links(x), True)),
                "pipelines_enabled": K(UNSET),
                "branching_model_settings": K(UNSET),
            }
        )

        return mapping

    def get_mapping_to_provider(self) -> dict[str, Any]:
        mapping: dict[str, Any] = {"name": S("name")}

        for key in self._omit_if_empty:
            value = self.__getattribute__(key)
            if not is_unset(value) and value:
                mapping[key] = S(key)

        if is_set_and_present(self.project_key) and len(self.project_key) > 0:
            mapping["project"] = {"key": S("project_key")}
        else:
            mapping["project"] = K({})

        return mapping

    def pipelines_config_to_provider(self) -> dict[str, Any]:
        return {"enabled": self.pipelines_enabled is True}

    def branching_model_settings_to_provider(self) -> dict[str, Any] | None:
        if is_set_and_present(self.branching_model_settings):
            return self.branching_model_settings.to_provider_data()
        else:
            return None
