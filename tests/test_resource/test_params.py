"""Tests for terrakube_cli.resource.params -- definitions to Typer options."""

from __future__ import annotations

import pytest

from terrakube_cli.exceptions import DefinitionError
from terrakube_cli.resource.params import (
    build_field_options,
    build_filter_option,
    build_id_option,
    build_parent_options,
    check_unique,
    sanitize_param_name,
)
from terrakube_cli.resource.types import FieldDef, FieldType, ParentScope


class TestSanitizeParamName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("organization-id", "organization_id"),
            ("tagId", "tag_id"),
            ("global", "global_"),
            ("1st", "_1st"),
            ("--", "param"),
        ],
    )
    def test_sanitize(self, raw: str, expected: str) -> None:
        assert sanitize_param_name(raw) == expected


class TestParentOptions:
    def test_id_and_name_flags(self) -> None:
        scopes = [
            ParentScope(name="organization", id_flag="organization-id", name_flag="organization-name"),
            ParentScope(name="workspace", id_flag="workspace-id", envvar="TERRAKUBE_WORKSPACE_ID"),
        ]
        descriptors = build_parent_options(scopes)
        assert [d["name"] for d in descriptors] == [
            "organization_id",
            "organization_name",
            "workspace_id",
        ]
        assert all(d["type"] is str for d in descriptors)
        assert descriptors[2]["default"].envvar == "TERRAKUBE_WORKSPACE_ID"
        assert descriptors[0]["default"].default == ""


class TestFieldOptions:
    FIELDS = (
        FieldDef("name", "name", FieldType.STRING, "n", True, "Organization name"),
        FieldDef("sensitive", "sensitive", FieldType.BOOL),
        FieldDef("priority", "priority", FieldType.INT),
    )

    def test_types_and_defaults(self) -> None:
        name, sensitive, priority = build_field_options(self.FIELDS, enforce_required=False)
        assert (name["type"], name["default"].default) == (str, "")
        assert (sensitive["type"], sensitive["default"].default) == (bool, False)
        assert (priority["type"], priority["default"].default) == (int, 0)

    def test_required_on_create(self) -> None:
        name = build_field_options(self.FIELDS, enforce_required=True)[0]
        assert name["default"].default is ...
        assert name["default"].help == "Organization name  [REQUIRED]"
        assert name["default"].param_decls == ("--name", "-n")

    def test_bool_has_negative_form(self) -> None:
        sensitive = build_field_options(self.FIELDS, enforce_required=False)[1]
        assert sensitive["default"].param_decls == ("--sensitive/--no-sensitive",)

    def test_help_defaults_to_flag_name(self) -> None:
        priority = build_field_options(self.FIELDS, enforce_required=False)[2]
        assert priority["default"].help == "priority"


class TestFixedOptions:
    def test_id_is_required(self) -> None:
        desc = build_id_option("workspace")
        assert desc["name"] == "id"
        assert desc["default"].default is ...

    def test_filter_defaults_to_empty(self) -> None:
        desc = build_filter_option()
        assert desc["name"] == "filter"
        assert desc["default"].default == ""


class TestCheckUnique:
    def test_distinct_names_pass(self) -> None:
        check_unique([build_id_option("x"), build_filter_option()], "x list")

    def test_collision(self) -> None:
        descriptors = build_field_options(
            (FieldDef("tag_id", "tag-id"), FieldDef("tag_id", "tagId")),
            enforce_required=False,
        )
        with pytest.raises(DefinitionError, match="--tag-id and --tagId collide"):
            check_unique(descriptors, "workspace-tag create")
