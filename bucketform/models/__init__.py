#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar, final

from jsonbender import F, OptionalS, S, bend  # type: ignore

from bucketform.utils import UNSET, is_unset

if TYPE_CHECKING:
    from collections.abc import Mapping

MT = TypeVar("MT", bound="ModelObject")
EMT = TypeVar("EMT", bound="EmbeddedModelObject")


class FailureType(Enum):
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclasses.dataclass
class ValidationContext:
    validation_failures: list[tuple[FailureType, str]] = dataclasses.field(default_factory=list)

    def add_failure(self, failure_type: FailureType, message: str):
        self.validation_failures.append((failure_type, message))

    def failures_of_type(self, failure_type: FailureType) -> list[str]:
        return [message for t, message in self.validation_failures if t == failure_type]

    def has_errors(self) -> bool:
        return len(self.failures_of_type(FailureType.ERROR)) > 0


class _FieldSupport:
    @classmethod
    def all_fields(cls) -> list[dataclasses.Field]:
        return list(dataclasses.fields(cls))  # type: ignore

    @staticmethod
    def is_read_only(field: dataclasses.Field) -> bool:
        return field.metadata.get("read_only", False) is True

    @staticmethod
    def is_embedded_model(field: dataclasses.Field) -> bool:
        return field.metadata.get("embedded_model", False) is True

    @staticmethod
    def is_sub_resource(field: dataclasses.Field) -> bool:
        return field.metadata.get("sub_resource", False) is True

    def keys(self, exclude_unset_keys: bool = True) -> list[str]:
        result = []

        for field in self.all_fields():
            if exclude_unset_keys:
                value = self.__getattribute__(field.name)
                if not is_unset(value):
                    result.append(field.name)
            else:
                result.append(field.name)

        return result


@dataclasses.dataclass
class EmbeddedModelObject(_FieldSupport, ABC):
    """
    The abstract base class for model objects embedded in another model object,
    e.g. the individual blocks of the branching model settings.

    Fields which are absent in the input data are UNSET and neither written
    to the model nor to the provider data.
    """

    @abstractmethod
    def validate(self, context: ValidationContext, parent_object: Any) -> None: ...

    def to_model_dict(self) -> dict[str, Any]:
        return {key: self.__getattribute__(key) for key in self.keys(exclude_unset_keys=True)}

    def to_provider_data(self) -> dict[str, Any]:
        return bend(self.get_mapping_to_provider(), self.to_model_dict())

    @classmethod
    def from_model_data(cls: type[EMT], data: Mapping[str, Any]) -> EMT:
        mapping = cls.get_mapping_from_model()
        return cls(**bend(mapping, data))  # type: ignore

    @classmethod
    def get_mapping_from_model(cls) -> dict[str, Any]:
        return {k: OptionalS(k, default=UNSET) for k in (x.name for x in cls.all_fields())}

    @classmethod
    def from_provider_data(cls: type[EMT], data: Mapping[str, Any]) -> EMT:
        mapping = cls.get_mapping_from_provider()
        return cls(**bend(mapping, data))  # type: ignore

    @classmethod
    def get_mapping_from_provider(cls) -> dict[str, Any]:
        # null values returned by the provider are treated as absent
        return {
            k: OptionalS(k, default=None) >> F(lambda x: UNSET if x is None else x)
            for k in (x.name for x in cls.all_fields())
        }

    def get_mapping_to_provider(self) -> dict[str, Any]:
        return {
            field.name: S(field.name)
            for field in self.all_fields()
            if not self.is_read_only(field) and not is_unset(self.__getattribute__(field.name))
        }


@dataclasses.dataclass
class ModelObject(_FieldSupport, ABC):
    """
    The abstract base class for any top-level model object.
    """

    @property
    @abstractmethod
    def model_object_name(self) -> str: ...

    @abstractmethod
    def get_model_header(self) -> str: ...

    @abstractmethod
    def validate(self, context: ValidationContext, parent_object: Any) -> None: ...

    @classmethod
    def provider_fields(cls) -> list[dataclasses.Field]:
        return [
            field
            for field in dataclasses.fields(cls)  # type: ignore
            if not cls.is_read_only(field) and not cls.is_sub_resource(field) and not cls.is_embedded_model(field)
        ]

    def to_model_dict(self) -> dict[str, Any]:
        result = {}

        for field in self.all_fields():
            value = self.__getattribute__(field.name)
            if is_unset(value):
                continue
            elif self.is_embedded_model(field):
                # embedded models are represented as a list with at most one element.
                result[field.name] = [value.to_model_dict()] if value is not None else []
            else:
                result[field.name] = value

        return result

    @classmethod
    @final
    def from_model_data(cls: type[MT], data: Mapping[str, Any]) -> MT:
        mapping = cls.get_mapping_from_model()
        return cls(**bend(mapping, data))  # type: ignore

    @classmethod
    def get_mapping_from_model(cls) -> dict[str, Any]:
        return {k: OptionalS(k, default=UNSET) for k in (x.name for x in cls.all_fields())}

    @classmethod
    @final
    def from_provider_data(cls: type[MT], data: Mapping[str, Any]) -> MT:
        mapping = cls.get_mapping_from_provider()
        return cls(**bend(mapping, data))  # type: ignore

    @classmethod
    def get_mapping_from_provider(cls) -> dict[str, Any]:
        return {k: OptionalS(k, default=UNSET) for k in (x.name for x in cls.all_fields())}

    def to_provider_data(self) -> dict[str, Any]:
        return bend(self.get_mapping_to_provider(), self.to_model_dict())

    def get_mapping_to_provider(self) -> dict[str, Any]:
        return {
            field.name: S(field.name)
            for field in self.provider_fields()
            if not is_unset(self.__getattribute__(field.name))
        }
