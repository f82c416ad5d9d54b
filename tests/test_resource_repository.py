#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

import jsonschema
import pytest

from bucketform.providers.bitbucket.exception import BitbucketException
from bucketform.resource_repository import (
    InvalidIdentityError,
    create_repository,
    delete_repository,
    import_repository,
    parse_identity,
    read_repository,
    repo_slug_of,
    resource_repository,
    update_repository,
)
from tests.models import load_json_resource
from tests.providers.bitbucket.bitbucket_provider_mock import FakeRequester, create_provider

_REPO_PATH = "2.0/repositories/acme/widgets"
_CORE_PATH = "2.0/repositories/acme/widgets-core"


@pytest.fixture()
def descriptor():
    return resource_repository()


def _repo_response(name: str, slug: str) -> dict:
    data = load_json_resource("bitbucket-repo.json")
    data["name"] = name
    data["slug"] = slug
    data["links"]["clone"] = [
        {"name": "https", "href": f"https://bitbucket.org/acme/{slug}.git"},
        {"name": "ssh", "href": f"git@bitbucket.org:acme/{slug}.git"},
    ]
    return data


class TestIdentity:
    @pytest.mark.parametrize(
        "identity,expected",
        [
            ("ownerA/slugB", ("ownerA", "slugB")),
            ("acme/widgets-core", ("acme", "widgets-core")),
            ("acme/", ("acme", "")),
        ],
    )
    def test_parse_identity(self, identity, expected):
        assert parse_identity(identity) == expected

    @pytest.mark.parametrize("identity", ["acme", "acme/widgets/core", ""])
    def test_parse_invalid_identity(self, identity):
        with pytest.raises(InvalidIdentityError) as err:
            parse_identity(identity)

        assert str(err.value) == f"incorrect id format '{identity}', should match 'owner/slug'"

    def test_repo_slug_defaults_to_name(self, descriptor):
        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"})
        assert repo_slug_of(d) == "widgets"

        d.set("slug", "widgets-core")
        assert repo_slug_of(d) == "widgets-core"


class TestCreate:
    @pytest.mark.asyncio
    async def test_create(self, descriptor):
        requester = FakeRequester()
        requester.respond("GET", _REPO_PATH, 200, _repo_response("widgets", "widgets"))
        requester.respond("GET", f"{_REPO_PATH}/pipelines_config", 200, {"enabled": False})
        requester.respond("GET", f"{_REPO_PATH}/branching-model/settings", 200, {"branch_types": []})

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets", "is_private": True})

        await create_repository(d, create_provider(requester))

        assert requester.call_summary == [
            ("POST", _REPO_PATH),
            ("PUT", f"{_REPO_PATH}/pipelines_config"),
            ("GET", _REPO_PATH),
            ("GET", f"{_REPO_PATH}/pipelines_config"),
            ("GET", f"{_REPO_PATH}/branching-model/settings"),
        ]

        assert requester.calls[0][2] == {
            "name": "widgets",
            "scm": "git",
            "is_private": True,
            "fork_policy": "allow_forks",
            "project": {},
        }
        assert requester.calls[1][2] == {"enabled": False}

        assert d.id == "acme/widgets"
        assert d.get("clone_https") == "https://bitbucket.org/acme/widgets.git"
        assert d.get("clone_ssh") == "git@bitbucket.org:acme/widgets.git"
        assert d.get("uuid") == "{7e3c5a9d-2b1f-4c8e-9a7d-5f6e3b2c1a0d}"
        assert d.get("slug") == ""
        assert d.get("pipelines_enabled") is False
        assert d.get("branching_model_settings") == [{"branch_types": []}]

    @pytest.mark.asyncio
    async def test_create_with_branching_model_settings(self, descriptor):
        requester = FakeRequester()

        d = descriptor.new_resource_data(
            {
                "owner": "acme",
                "name": "widgets",
                "pipelines_enabled": True,
                "branching_model_settings": [
                    {
                        "development": [{"name": "develop", "use_mainbranch": False}],
                        "branch_types": [{"kind": "feature", "prefix": "feature/"}],
                    }
                ],
            }
        )

        await create_repository(d, create_provider(requester))

        assert requester.call_summary[:3] == [
            ("POST", _REPO_PATH),
            ("PUT", f"{_REPO_PATH}/pipelines_config"),
            ("PUT", f"{_REPO_PATH}/branching-model/settings"),
        ]
        assert requester.calls[1][2] == {"enabled": True}
        assert requester.calls[2][2] == {
            "development": {"name": "develop", "use_mainbranch": False},
            "branch_types": [{"kind": "feature", "enabled": True, "prefix": "feature/"}],
        }

    @pytest.mark.asyncio
    async def test_create_uses_slug(self, descriptor):
        requester = FakeRequester()

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets", "slug": "widgets-core"})

        await create_repository(d, create_provider(requester))

        assert requester.call_summary[0] == ("POST", _CORE_PATH)
        assert requester.calls[0][2]["slug"] == "widgets-core"
        assert d.id == "acme/widgets-core"

    @pytest.mark.asyncio
    async def test_create_failure(self, descriptor):
        requester = FakeRequester()
        requester.respond("POST", _REPO_PATH, 400, {"type": "error", "error": {"message": "invalid"}})

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"})

        with pytest.raises(BitbucketException) as err:
            await create_repository(d, create_provider(requester))

        assert err.value.status == 400
        assert requester.call_summary == [("POST", _REPO_PATH)]
        assert d.id == ""

    @pytest.mark.asyncio
    async def test_create_failure_in_sub_resource_is_not_rolled_back(self, descriptor):
        requester = FakeRequester()
        requester.respond("PUT", f"{_REPO_PATH}/pipelines_config", 500, {"type": "error"})

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"})

        with pytest.raises(BitbucketException):
            await create_repository(d, create_provider(requester))

        assert requester.call_summary == [("POST", _REPO_PATH), ("PUT", f"{_REPO_PATH}/pipelines_config")]
        assert d.id == "acme/widgets"

    @pytest.mark.asyncio
    async def test_create_invalid_schema(self, descriptor):
        requester = FakeRequester()

        d = descriptor.new_resource_data(
            {"owner": "acme", "name": "widgets", "branching_model_settings": [{"branch_types": [{"kind": "trunk"}]}]}
        )

        with pytest.raises(jsonschema.ValidationError):
            await create_repository(d, create_provider(requester))

        assert requester.calls == []

    @pytest.mark.asyncio
    async def test_create_invalid_model(self, descriptor):
        requester = FakeRequester()

        d = descriptor.new_resource_data(
            {
                "owner": "acme",
                "name": "widgets",
                "branching_model_settings": [{"branch_types": [{"kind": "feature"}, {"kind": "feature"}]}],
            }
        )

        with pytest.raises(RuntimeError) as err:
            await create_repository(d, create_provider(requester))

        assert "multiple branch types of kind 'feature'" in str(err.value)
        assert requester.calls == []


class TestRead:
    @pytest.mark.asyncio
    async def test_read(self, descriptor):
        requester = FakeRequester()
        requester.respond("GET", _CORE_PATH, 200, load_json_resource("bitbucket-repo.json"))
        requester.respond("GET", f"{_CORE_PATH}/pipelines_config", 200, {"enabled": True})
        requester.respond(
            "GET",
            f"{_CORE_PATH}/branching-model/settings",
            200,
            load_json_resource("bitbucket-branching-model-settings.json"),
        )

        d = descriptor.new_resource_data(id="acme/widgets-core")

        assert await read_repository(d, create_provider(requester)) is True

        assert d.get("owner") == "acme"
        assert d.get("name") == "widgets"
        assert d.get("slug") == "widgets-core"
        assert d.get("project_key") == "WID"
        assert d.get("website") == ""
        assert d.get("has_issues") is True
        assert d.get("fork_policy") == "no_public_forks"
        assert d.get("pipelines_enabled") is True

        settings = d.get("branching_model_settings")
        assert len(settings) == 1
        assert settings[0]["development"] == [{"name": "develop", "use_mainbranch": False, "is_valid": True}]
        assert [x["kind"] for x in settings[0]["branch_types"]] == ["feature", "release", "hotfix", "bugfix"]

        # the resulting state is a valid configuration again
        descriptor.schema.validate(d.to_dict())

    @pytest.mark.asyncio
    async def test_read_not_found(self, descriptor):
        requester = FakeRequester()
        requester.respond("GET", _REPO_PATH, 404, {"type": "error"})

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"}, id="acme/widgets")
        state_before = d.to_dict()

        assert await read_repository(d, create_provider(requester)) is False

        assert d.to_dict() == state_before
        assert d.id == "acme/widgets"
        assert requester.call_summary == [("GET", _REPO_PATH)]

    @pytest.mark.asyncio
    async def test_read_ignores_missing_sub_resources(self, descriptor):
        requester = FakeRequester()
        requester.respond("GET", _REPO_PATH, 200, _repo_response("widgets", "widgets"))

        d = descriptor.new_resource_data(
            {"owner": "acme", "name": "widgets", "pipelines_enabled": True}, id="acme/widgets"
        )

        assert await read_repository(d, create_provider(requester)) is True

        assert d.get("pipelines_enabled") is True
        assert d.get("branching_model_settings") == []
        assert len(requester.calls) == 3

    @pytest.mark.asyncio
    async def test_read_null_values_keep_state_valid(self, descriptor):
        response = _repo_response("widgets", "widgets")
        response["uuid"] = None
        response["fork_policy"] = None

        requester = FakeRequester()
        requester.respond("GET", _REPO_PATH, 200, response)
        requester.respond("GET", f"{_REPO_PATH}/pipelines_config", 200, {"enabled": None})

        d = descriptor.new_resource_data(
            {"owner": "acme", "name": "widgets", "fork_policy": "no_forks"}, id="acme/widgets"
        )
        provider = create_provider(requester)

        assert await read_repository(d, provider) is True

        assert d.get("uuid") == ""
        assert d.get("fork_policy") == "no_forks"
        assert d.get("pipelines_enabled") is False

        # the state that was read can be applied again
        await update_repository(d, provider)

        assert requester.call_summary[3] == ("PUT", _REPO_PATH)
        assert requester.calls[3][2]["fork_policy"] == "no_forks"
        assert requester.calls[4][2] == {"enabled": False}

    @pytest.mark.asyncio
    async def test_read_invalid_identity(self, descriptor):
        requester = FakeRequester()

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"}, id="acme-widgets")

        with pytest.raises(InvalidIdentityError):
            await read_repository(d, create_provider(requester))

        assert requester.calls == []

    @pytest.mark.asyncio
    async def test_import(self, descriptor):
        requester = FakeRequester()
        requester.respond("GET", _REPO_PATH, 200, _repo_response("widgets", "widgets"))
        requester.respond("GET", f"{_REPO_PATH}/pipelines_config", 200, {"enabled": False})

        d = descriptor.new_resource_data(id="acme/widgets")

        assert await import_repository(d, create_provider(requester)) is True

        assert d.get("owner") == "acme"
        assert d.get("slug") == "widgets"
        assert d.get("name") == "widgets"
        assert d.get("clone_ssh") == "git@bitbucket.org:acme/widgets.git"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_resends_all_branch_types(self, descriptor):
        requester = FakeRequester()

        config = load_json_resource("bucketform-repo.json")
        config["branching_model_settings"][0]["branch_types"][0]["prefix"] = "feat/"
        d = descriptor.new_resource_data(config, id="acme/widgets-core")

        await update_repository(d, create_provider(requester))

        assert requester.call_summary[:3] == [
            ("PUT", _CORE_PATH),
            ("PUT", f"{_CORE_PATH}/pipelines_config"),
            ("PUT", f"{_CORE_PATH}/branching-model/settings"),
        ]

        assert requester.calls[0][2]["project"] == {"key": "WID"}
        assert requester.calls[1][2] == {"enabled": True}
        assert requester.calls[2][2]["branch_types"] == [
            {"kind": "feature", "enabled": True, "prefix": "feat/"},
            {"kind": "release", "enabled": True, "prefix": "release/"},
            {"kind": "hotfix", "enabled": False},
        ]

    @pytest.mark.asyncio
    async def test_update_failure(self, descriptor):
        requester = FakeRequester()
        requester.respond("PUT", _REPO_PATH, 403, {"type": "error"})

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"}, id="acme/widgets")

        with pytest.raises(BitbucketException):
            await update_repository(d, create_provider(requester))

        assert requester.call_summary == [("PUT", _REPO_PATH)]


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, descriptor):
        requester = FakeRequester()

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets", "slug": "widgets-core"})

        await delete_repository(d, create_provider(requester))

        assert requester.call_summary == [("DELETE", _CORE_PATH)]

    @pytest.mark.asyncio
    async def test_delete_failure(self, descriptor):
        requester = FakeRequester()
        requester.respond("DELETE", _REPO_PATH, 404, {"type": "error"})

        d = descriptor.new_resource_data({"owner": "acme", "name": "widgets"})

        with pytest.raises(BitbucketException):
            await delete_repository(d, create_provider(requester))
