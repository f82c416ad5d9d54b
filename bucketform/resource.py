#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import copy
import dataclasses
import json
from typing import TYPE_CHECKING, Any, Protocol

from importlib_resources import files

from bucketform import resources
from bucketform.utils import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from bucketform.providers.bitbucket import BitbucketProvider

_logger = get_logger(__name__)

_ZERO_VALUES: dict[str, Any] = {
    "string": "",
    "boolean": False,
    "integer": 0,
    "array": [],
}


class ResourceSchema:
    """
    The schema declaration of a resource type, backed by a JSON schema document.

    Besides validation, the schema provides the default values of attributes
    and the zero value of attributes that have not been set at all.
    """

    def __init__(self, schema: Mapping[str, Any]):
        self._schema = schema

    @classmethod
    def load(cls, name: str) -> ResourceSchema:
        return cls(json.loads(files(resources).joinpath(f"schemas/{name}.json").read_text()))

    @property
    def schema(self) -> Mapping[str, Any]:
        return self._schema

    @property
    def properties(self) -> Mapping[str, Any]:
        return self._schema["properties"]

    def computed_keys(self) -> set[str]:
        return {k for k, v in self.properties.items() if v.get("readOnly", False) is True}

    def zero_value(self, key: str) -> Any:
        prop = self.properties.get(key)
        if prop is None:
            raise KeyError(f"unknown attribute '{key}'")

        return copy.deepcopy(_ZERO_VALUES.get(prop.get("type", "string")))

    def validate(self, data: Mapping[str, Any]) -> None:
        from jsonschema import Draft202012Validator

        Draft202012Validator(self._schema).validate(data)

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Sets the default value of every attribute that is not present, including
        attributes of nested blocks.
        """
        self._apply_defaults(self._schema, data)
        return data

    def _resolve(self, schema: Mapping[str, Any]) -> Mapping[str, Any]:
        ref = schema.get("$ref")
        if ref is None:
            return schema

        # only local references are supported, e.g. '#/$defs/branch_type'
        node: Any = self._schema
        for segment in ref.removeprefix("#/").split("/"):
            node = node[segment]
        return node

    def _apply_defaults(self, schema: Mapping[str, Any], data: Any) -> None:
        schema = self._resolve(schema)

        if schema.get("type") == "object" and isinstance(data, dict):
            for key, prop in schema.get("properties", {}).items():
                prop = self._resolve(prop)
                if key not in data:
                    if "default" in prop:
                        data[key] = copy.deepcopy(prop["default"])
                else:
                    self._apply_defaults(prop, data[key])

        elif schema.get("type") == "array" and isinstance(data, list):
            items = schema.get("items")
            if items is not None:
                for item in data:
                    self._apply_defaults(items, item)


class ResourceData:
    """
    The state of a single resource instance as handed to the lifecycle operations.

    Attributes are accessed via get / set, attributes that have never been set
    evaluate to the zero value of their type.
    """

    def __init__(self, schema: ResourceSchema, config: Mapping[str, Any] | None = None, id: str | None = None):
        self._schema = schema
        self._id = id if id is not None else ""
        self._state = schema.apply_defaults(copy.deepcopy(dict(config)) if config is not None else {})

    @property
    def schema(self) -> ResourceSchema:
        return self._schema

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        _logger.trace("setting id to '%s'", value)
        self._id = value

    def get(self, key: str) -> Any:
        if key in self._state:
            return copy.deepcopy(self._state[key])
        else:
            return self._schema.zero_value(key)

    def set(self, key: str, value: Any) -> None:
        if key not in self._schema.properties:
            raise KeyError(f"unknown attribute '{key}'")

        _logger.trace("setting attribute '%s' to '%s'", key, value)
        self._state[key] = copy.deepcopy(value)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._state)

    def __repr__(self) -> str:
        return f"ResourceData(id='{self.id}', state={json.dumps(self._state)})"


class LifecycleFn(Protocol):
    async def __call__(self, d: ResourceData, provider: BitbucketProvider) -> Any: ...


@dataclasses.dataclass(frozen=True)
class ResourceDescriptor:
    type_name: str
    schema: ResourceSchema
    create: LifecycleFn
    read: LifecycleFn
    update: LifecycleFn
    delete: LifecycleFn
    importer: LifecycleFn | None = None

    def new_resource_data(self, config: Mapping[str, Any] | None = None, id: str | None = None) -> ResourceData:
        return ResourceData(self.schema, config, id)
