"""Tests for terrakube_cli.resource.registrar -- command generation."""

from __future__ import annotations

import contextlib
import json
from typing import Any, Optional

import pytest
import typer
from typer.testing import CliRunner

from terrakube_cli.exceptions import DefinitionError, MissingFlagError
from terrakube_cli.models import Organization, Variable
from terrakube_cli.resource import (
    Config,
    FieldDef,
    FieldType,
    ListOptions,
    ParentScope,
    Runtime,
    register,
)


class FakeApi:
    """In-memory CRUD callbacks recording their arguments."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, list[str], Any]] = []
        self.client = object()

    def list(self, client: Any, parent_ids: list[str], opts: Optional[ListOptions]) -> list[Variable]:
        self.calls.append(("list", client, parent_ids, opts))
        return [Variable(id="v-1", key="region", value="eu", workspace="w-1")]

    def get(self, client: Any, parent_ids: list[str], resource_id: str) -> Variable:
        self.calls.append(("get", client, parent_ids, resource_id))
        return Variable(id=resource_id, key="region")

    def create(self, client: Any, parent_ids: list[str], resource: Variable) -> Variable:
        self.calls.append(("create", client, parent_ids, resource))
        return resource.model_copy(update={"id": "v-new"})

    def update(self, client: Any, parent_ids: list[str], resource: Variable) -> Variable:
        self.calls.append(("update", client, parent_ids, resource))
        return resource

    def delete(self, client: Any, parent_ids: list[str], resource_id: str) -> None:
        self.calls.append(("delete", client, parent_ids, resource_id))

    def runtime(self, output: str = "json") -> Runtime:
        return Runtime(
            new_client=lambda ctx: contextlib.nullcontext(self.client),
            get_output=lambda ctx: output,
        )


ORG_SCOPE = ParentScope(name="organization", id_flag="organization-id")
WS_SCOPE = ParentScope(name="workspace", id_flag="workspace-id")

VARIABLE_FIELDS = (
    FieldDef("key", "key", FieldType.STRING, "k", True, "Variable key"),
    FieldDef("value", "value", FieldType.STRING, "v"),
    FieldDef("description", "description"),
    FieldDef("sensitive", "sensitive", FieldType.BOOL),
)


def _config(api: FakeApi, output: str = "json", **overrides: Any) -> Config[Variable]:
    kwargs: dict[str, Any] = dict(
        name="variable",
        model=Variable,
        runtime=api.runtime(output),
        aliases=("var",),
        parents=(ORG_SCOPE, WS_SCOPE),
        fields=VARIABLE_FIELDS,
        list=api.list,
        get=api.get,
        create=api.create,
        update=api.update,
        delete=api.delete,
    )
    kwargs.update(overrides)
    return Config(**kwargs)


def _app(cfg: Config[Any]) -> typer.Typer:
    app = typer.Typer()
    register(app, cfg)
    return app


PARENTS = ["--organization-id", "o-1", "--workspace-id", "w-1"]


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# Command set
# ---------------------------------------------------------------------------


class TestCommandSet:
    def test_all_verbs_registered(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "--help"])
        assert result.exit_code == 0
        for verb in ("list", "get", "create", "update", "delete"):
            assert verb in result.output

    def test_omitted_verbs_are_not_registered(self, api: FakeApi, runner: CliRunner) -> None:
        cfg = _config(api, create=None, update=None, delete=None)
        app = _app(cfg)
        result = runner.invoke(app, ["variable", "create", *PARENTS, "--key", "k"])
        assert result.exit_code == 2
        assert api.calls == []

    def test_alias_runs_the_same_commands(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["var", "get", *PARENTS, "--id", "v-1"])
        assert result.exit_code == 0, result.output
        assert api.calls[0][0] == "get"

    def test_alias_is_hidden_from_help(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["--help"])
        assert result.exit_code == 0
        assert "variable" in result.output
        assert " var " not in result.output

    def test_flag_collision_is_definition_error(self, api: FakeApi) -> None:
        cfg = _config(
            api,
            fields=VARIABLE_FIELDS + (FieldDef("key", "Key"),),
        )
        with pytest.raises(DefinitionError, match="collide"):
            register(typer.Typer(), cfg)

    def test_invalid_field_is_definition_error(self, api: FakeApi) -> None:
        cfg = _config(api, fields=(FieldDef("nope", "nope"),))
        with pytest.raises(DefinitionError):
            register(typer.Typer(), cfg)

    def test_name_flag_without_resolver_is_definition_error(self, api: FakeApi) -> None:
        scope = ParentScope(name="organization", id_flag="organization-id", name_flag="organization-name")
        with pytest.raises(DefinitionError, match="no resolver"):
            register(typer.Typer(), _config(api, parents=(scope,)))


# ---------------------------------------------------------------------------
# Verbs
# ---------------------------------------------------------------------------


class TestList:
    def test_without_filter(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "list", *PARENTS])
        assert result.exit_code == 0, result.output
        assert api.calls == [("list", api.client, ["o-1", "w-1"], None)]
        assert json.loads(result.stdout)[0]["key"] == "region"

    def test_with_filter(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(
            _app(_config(api)),
            ["variable", "list", *PARENTS, "--filter", "key==region"],
        )
        assert result.exit_code == 0, result.output
        assert api.calls[0][3] == ListOptions(filter="key==region")

    def test_missing_parent_raises_before_callback(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "list", "--organization-id", "o-1"])
        assert isinstance(result.exception, MissingFlagError)
        assert str(result.exception) == "--workspace-id is required"
        assert api.calls == []

    def test_table_output(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api, output="tsv")), ["variable", "list", *PARENTS])
        assert result.exit_code == 0, result.output
        assert result.stdout == "v-1\tregion\teu\t\t\tfalse\tfalse\n"


class TestGet:
    def test_passes_id(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "get", *PARENTS, "--id", "v-9"])
        assert result.exit_code == 0, result.output
        assert api.calls == [("get", api.client, ["o-1", "w-1"], "v-9")]
        assert json.loads(result.stdout)["id"] == "v-9"

    def test_id_is_required(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "get", *PARENTS])
        assert result.exit_code == 2
        assert api.calls == []


class TestCreate:
    def test_binds_all_fields(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(
            _app(_config(api)),
            ["variable", "create", *PARENTS, "-k", "region", "--value", "eu", "--sensitive"],
        )
        assert result.exit_code == 0, result.output
        verb, _, parent_ids, resource = api.calls[0]
        assert verb == "create"
        assert parent_ids == ["o-1", "w-1"]
        assert resource.key == "region"
        assert resource.value == "eu"
        assert resource.description is None
        assert resource.sensitive is True
        assert json.loads(result.stdout)["id"] == "v-new"

    def test_required_field_enforced(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "create", *PARENTS, "--value", "eu"])
        assert result.exit_code == 2
        assert api.calls == []


class TestUpdate:
    def test_only_changed_fields_are_set(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(
            _app(_config(api)),
            ["variable", "update", *PARENTS, "--id", "v-1", "--no-sensitive"],
        )
        assert result.exit_code == 0, result.output
        resource = api.calls[0][3]
        assert resource.id == "v-1"
        assert resource.sensitive is False
        assert resource.model_fields_set == {"id", "sensitive"}

    def test_required_fields_are_optional(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(
            _app(_config(api)),
            ["variable", "update", *PARENTS, "--id", "v-1", "--value", "us"],
        )
        assert result.exit_code == 0, result.output
        resource = api.calls[0][3]
        assert resource.value == "us"
        assert "key" not in resource.model_fields_set


class TestDelete:
    def test_prints_confirmation(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "delete", *PARENTS, "--id", "v-1"])
        assert result.exit_code == 0, result.output
        assert api.calls == [("delete", api.client, ["o-1", "w-1"], "v-1")]
        assert result.stdout == "variable deleted\n"

    def test_empty_id_is_passed_through(self, api: FakeApi, runner: CliRunner) -> None:
        result = runner.invoke(_app(_config(api)), ["variable", "delete", *PARENTS, "--id", ""])
        assert result.exit_code == 0, result.output
        assert api.calls[0][3] == ""


class TestWithoutParents:
    def test_top_level_resource(self, runner: CliRunner) -> None:
        seen: list[list[str]] = []

        def list_orgs(client: Any, parent_ids: list[str], opts: Any) -> list[Organization]:
            seen.append(parent_ids)
            return []

        cfg = Config(
            name="organization",
            model=Organization,
            runtime=Runtime(new_client=lambda ctx: contextlib.nullcontext(None), get_output=lambda ctx: "json"),
            fields=(FieldDef("name", "name", FieldType.STRING, "n", True),),
            list=list_orgs,
        )
        result = runner.invoke(_app(cfg), ["organization", "list"])
        assert result.exit_code == 0, result.output
        assert seen == [[]]
        assert json.loads(result.stdout) == []
