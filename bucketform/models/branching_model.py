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

from jsonbender import F, Forall, If, K, OptionalS, S  # type: ignore

from bucketform.models import EmbeddedModelObject, FailureType, ValidationContext
from bucketform.utils import UNSET, is_set_and_present, is_unset

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@dataclasses.dataclass
class DevelopmentBranch(EmbeddedModelObject):
    name: str
    use_mainbranch: bool
    is_valid: bool = dataclasses.field(metadata={"read_only": True})

    def validate(self, context: ValidationContext, parent_object: Any) -> None:
        if self.use_mainbranch is True and is_set_and_present(self.name) and len(self.name) > 0:
            context.add_failure(
                FailureType.WARNING,
                f"{parent_object.get_model_header()} has 'development.use_mainbranch' enabled, "
                f"'development.name' ('{self.name}') will be ignored.",
            )


@dataclasses.dataclass
class ProductionBranch(EmbeddedModelObject):
    enabled: bool
    name: str
    use_mainbranch: bool
    is_valid: bool = dataclasses.field(metadata={"read_only": True})

    def validate(self, context: ValidationContext, parent_object: Any) -> None:
        if self.use_mainbranch is True and is_set_and_present(self.name) and len(self.name) > 0:
            context.add_failure(
                FailureType.WARNING,
                f"{parent_object.get_model_header()} has 'production.use_mainbranch' enabled, "
                f"'production.name' ('{self.name}') will be ignored.",
            )


@dataclasses.dataclass
class BranchType(EmbeddedModelObject):
    kind: str
    enabled: bool
    prefix: str

    _valid_kinds: ClassVar[set[str]] = {"release", "hotfix", "feature", "bugfix"}

    def validate(self, context: ValidationContext, parent_object: Any) -> None:
        if self.kind not in self._valid_kinds:
            valid_kinds = " | ".join(f'"{x}"' for x in sorted(self._valid_kinds))
            context.add_failure(
                FailureType.ERROR,
                f"{parent_object.get_model_header()} has a branch type with invalid 'kind' '{self.kind}', "
                f"only {valid_kinds} are allowed.",
            )


@dataclasses.dataclass
class BranchingModelSettings(EmbeddedModelObject):
    """
    The branching model settings of a repository, maintained via the
    'branching-model/settings' sub-resource.

    In the model data, the development and production blocks are lists with at most
    one element, in the provider data they are plain objects.
    """

    development: DevelopmentBranch
    production: ProductionBranch
    branch_types: list[BranchType]

    _max_branch_types: ClassVar[int] = 4

    def validate(self, context: ValidationContext, parent_object: Any) -> None:
        if is_set_and_present(self.development):
            self.development.validate(context, parent_object)

        if is_set_and_present(self.production):
            self.production.validate(context, parent_object)

        if is_set_and_present(self.branch_types):
            if len(self.branch_types) > self._max_branch_types:
                context.add_failure(
                    FailureType.ERROR,
                    f"{parent_object.get_model_header()} has more than {self._max_branch_types} "
                    f"'branch_types' defined.",
                )

            seen_kinds = set()
            for branch_type in self.branch_types:
                branch_type.validate(context, parent_object)

                if branch_type.kind in seen_kinds:
                    context.add_failure(
                        FailureType.ERROR,
                        f"{parent_object.get_model_header()} has multiple branch types of kind '{branch_type.kind}'.",
                    )
                seen_kinds.add(branch_type.kind)

    def to_model_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}

        if not is_unset(self.development):
            result["development"] = [self.development.to_model_dict()]

        if not is_unset(self.production):
            result["production"] = [self.production.to_model_dict()]

        if not is_unset(self.branch_types):
            result["branch_types"] = [x.to_model_dict() for x in self.branch_types]

        return result

    def to_provider_data(self) -> dict[str, Any]:
        result: dict[str, Any] = {}

        if not is_unset(self.development):
            result["development"] = self.development.to_provider_data()

        if not is_unset(self.production):
            result["production"] = self.production.to_provider_data()

        if not is_unset(self.branch_types):
            result["branch_types"] = [x.to_provider_data() for x in self.branch_types]

        return result

    @classmethod
    def get_mapping_from_model(cls) -> dict[str, Any]:
        def first_block(key: str, model_type: type[EmbeddedModelObject]):
            return If(
                OptionalS(key, default=[]) == K([]),
                K(UNSET),
                S(key, 0) >> F(lambda x: model_type.from_model_data(x)),
            )

        return {
            "development": first_block("development", DevelopmentBranch),
            "production": first_block("production", ProductionBranch),
            "branch_types": If(
                OptionalS("branch_types", default=None) == K(None),
                K(UNSET),
                S("branch_types") >> Forall(lambda x: BranchType.from_model_data(x)),
            ),
        }

    @classmethod
    def get_mapping_from_provider(cls) -> dict[str, Any]:
        def block(key: str, model_type: type[EmbeddedModelObject]):
            return If(
                OptionalS(key, default=None) == K(None),
                K(UNSET),
                S(key) >> F(lambda x: model_type.from_provider_data(x)),
            )

        return {
            "development": block("development", DevelopmentBranch),
            "production": block("production", ProductionBranch),
            "branch_types": If(
                OptionalS("branch_types", default=None) == K(None),
                K(UNSET),
                S("branch_types") >> Forall(lambda x: BranchType.from_provider_data(x)),
            ),
        }


def expand_branching_model_settings(settings: Sequence[Mapping[str, Any]]) -> dict[str, Any] | None:
    """
    Converts the branching model settings of the model data (a list with at most one element)
    into the request body of the branching model settings sub-resource.

    Returns None if no settings are present.
    """
    if len(settings) == 0 or settings[0] is None:
        return None

    return BranchingModelSettings.from_model_data(settings[0]).to_provider_data()


def flatten_branching_model_settings(data: Mapping[str, Any]) -> list[dict[str, Any]]:
    """
    Converts a branching model settings response body into its model data representation.
    """
    return [BranchingModelSettings.from_provider_data(data).to_model_dict()]
