"""Tests for flask_fluxo.schemas.fields -- Bind tags and shape extraction."""

from __future__ import annotations

from typing import Annotated, Any, Optional

import pytest
from pydantic import BaseModel
from werkzeug.datastructures import FileStorage

from flask_fluxo.schemas import Bind, Shape, extract_shape
from flask_fluxo.schemas.fields import classify, parse_rules, resolve_hints, tag_name


class Profile(BaseModel):
    bio: Annotated[str, Bind(json="bio")] = ""


class Tagged(Shape):
    id: Annotated[str, Bind(uri="id")] = ""
    name: Annotated[str, Bind(json="name,omitempty", validate="required,min=2")] = ""
    limit: Annotated[int, Bind(form="limit")] = 0
    token: Annotated[str, Bind(header="Authorization")] = ""
    secret: Annotated[str, Bind(json="-")] = ""
    plain: str = ""
    avatar: Annotated[Optional[FileStorage], Bind(form="avatar")] = None


class PathOnly(BaseModel):
    id: Annotated[str, Bind(uri="id")] = ""


def typed_handler(ctx: Any, req: Tagged) -> Profile:
    return Profile()


# ---------------------------------------------------------------------------
# Tag parsing
# ---------------------------------------------------------------------------


class TestTagName:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("name", "name"),
            ("name,omitempty", "name"),
            (" name ", "name"),
            ("-", None),
            ("", None),
            (",omitempty", None),
            (None, None),
        ],
    )
    def test_tag_name(self, value, expected) -> None:
        assert tag_name(value) == expected


class TestParseRules:
    def test_flags_and_params(self) -> None:
        assert parse_rules("required,min=2,max=10") == {"required": None, "min": "2", "max": "10"}

    def test_empty(self) -> None:
        assert parse_rules("") == {}
        assert parse_rules(None) == {}

    def test_skips_blank_segments(self) -> None:
        assert parse_rules("required,,email") == {"required": None, "email": None}


# ---------------------------------------------------------------------------
# Kind classification
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize(
        "hint, kind",
        [
            (str, "string"),
            (int, "integer"),
            (float, "number"),
            (bool, "boolean"),
            (Optional[int], "integer"),
            (int | None, "integer"),
            (Profile, "object"),
            (list[str], "array"),
            (list[Profile], "array"),
            (FileStorage, "file"),
            (list[FileStorage], "file_array"),
            (dict, "unknown"),
            (Any, "unknown"),
        ],
    )
    def test_classify(self, hint, kind) -> None:
        assert classify(hint) == kind


# ---------------------------------------------------------------------------
# Shape extraction
# ---------------------------------------------------------------------------


class TestExtractShape:
    def test_fields_in_declaration_order(self) -> None:
        shape = extract_shape(Tagged)
        assert shape.name == "Tagged"
        assert [f.name for f in shape.fields] == ["id", "name", "limit", "token", "secret", "plain", "avatar"]

    def test_binding_keys(self) -> None:
        fields = {f.name: f for f in extract_shape(Tagged).fields}
        assert fields["id"].path_key == "id"
        assert fields["name"].json_key == "name"
        assert fields["limit"].form_key == "limit"
        assert fields["token"].header_key == "Authorization"

    def test_rules_parsed(self) -> None:
        name = extract_shape(Tagged).fields[1]
        assert name.validate == "required,min=2"
        assert name.has_rule("required")
        assert name.rules["min"] == "2"

    def test_dash_opts_out_of_json(self) -> None:
        secret = extract_shape(Tagged).fields[4]
        assert secret.json_key is None
        assert secret.json_omit is True
        assert not secret.is_bound

    def test_untagged_field_is_unbound(self) -> None:
        plain = extract_shape(Tagged).fields[5]
        assert not plain.is_bound
        assert plain.kind == "string"

    def test_file_field(self) -> None:
        avatar = extract_shape(Tagged).fields[6]
        assert avatar.is_file
        assert avatar.kind == "file"

    def test_memoized(self) -> None:
        assert extract_shape(Tagged) is extract_shape(Tagged)

    def test_optional_model_unwrapped(self) -> None:
        assert extract_shape(Optional[Tagged]) is extract_shape(Tagged)

    @pytest.mark.parametrize("hint", [None, dict, str, list[Profile], Any])
    def test_non_model_returns_none(self, hint) -> None:
        assert extract_shape(hint) is None

    def test_has_body_binding(self) -> None:
        assert extract_shape(Tagged).has_body_binding()
        assert extract_shape(Profile).has_body_binding()
        assert not extract_shape(PathOnly).has_body_binding()


class TestResolveHints:
    def test_resolves_postponed_annotations(self) -> None:
        hints = resolve_hints(typed_handler)
        assert hints["req"] is Tagged
        assert hints["return"] is Profile
