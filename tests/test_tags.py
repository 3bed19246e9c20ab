"""Tests for tag resolution.

Covers:
- parse_tag on conventional tag strings (escapes, malformed fragments, repeats)
- lookup precedence (per-key metadata over the tag string)
- resolved_name fallbacks and empty-name handling
- has_option trimming and case-insensitivity
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from structural_diff.tags import has_option, lookup, parse_tag, resolved_name
from structural_diff.values.fields import FieldDescriptor, record_fields


@dataclass
class Sample:
    plain: int = 0
    named: int = field(default=0, metadata={"cmp": "n"})
    ident: int = field(default=0, metadata={"cmp": "key, Id ,omitempty"})
    only_option: int = field(default=0, metadata={"cmp": ",id", "json": "j"})
    tagged: int = field(default=0, metadata={"tag": 'cmp:"t,id" json:"tj"'})
    both: int = field(default=0, metadata={"cmp": "meta", "tag": 'cmp:"str"'})
    name_is_id: int = field(default=0, metadata={"cmp": "id"})
    non_string: int = field(default=0, metadata={"cmp": 42})


def _field(name: str) -> FieldDescriptor:
    return next(d for d in record_fields(Sample) if d.name == name)


# ---------------------------------------------------------------------------
# parse_tag
# ---------------------------------------------------------------------------


class TestParseTag:
    def test_pairs(self) -> None:
        assert parse_tag('cmp:"n,id" json:"name"') == {"cmp": "n,id", "json": "name"}

    def test_escaped_quote(self) -> None:
        assert parse_tag(r'cmp:"a\"b"') == {"cmp": 'a"b'}

    def test_first_occurrence_wins(self) -> None:
        assert parse_tag('cmp:"a" cmp:"b"') == {"cmp": "a"}

    def test_malformed_fragments_ignored(self) -> None:
        assert parse_tag('junk cmp:"a" bad:x') == {"cmp": "a"}

    def test_empty(self) -> None:
        assert parse_tag("") == {}


# ---------------------------------------------------------------------------
# lookup / resolved_name
# ---------------------------------------------------------------------------


class TestLookup:
    def test_missing_key(self) -> None:
        assert lookup(_field("plain"), "cmp") == ""

    def test_metadata_entry(self) -> None:
        assert lookup(_field("named"), "cmp") == "n"

    def test_tag_string(self) -> None:
        assert lookup(_field("tagged"), "json") == "tj"

    def test_metadata_entry_wins(self) -> None:
        assert lookup(_field("both"), "cmp") == "meta"

    def test_non_string_entry_ignored(self) -> None:
        assert lookup(_field("non_string"), "cmp") == ""


class TestResolvedName:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("plain", ""),
            ("named", "n"),
            ("ident", "key"),
            ("only_option", "j"),
            ("tagged", "t"),
        ],
    )
    def test_default_keys(self, name: str, expected: str) -> None:
        assert resolved_name("cmp", ("json", "yaml"), _field(name)) == expected

    def test_fallback_order(self) -> None:
        assert resolved_name("yaml", ("json", "cmp"), _field("tagged")) == "tj"

    def test_no_fallbacks(self) -> None:
        assert resolved_name("cmp", (), _field("only_option")) == ""


# ---------------------------------------------------------------------------
# has_option
# ---------------------------------------------------------------------------


class TestHasOption:
    def test_trimmed_and_case_insensitive(self) -> None:
        assert has_option("cmp", _field("ident"), "id")
        assert has_option("cmp", _field("ident"), "OMITEMPTY")

    def test_empty_name_with_option(self) -> None:
        assert has_option("cmp", _field("only_option"), "id")

    def test_option_in_tag_string(self) -> None:
        assert has_option("cmp", _field("tagged"), "id")

    def test_name_is_not_an_option(self) -> None:
        assert not has_option("cmp", _field("name_is_id"), "id")

    def test_only_primary_key_consulted(self) -> None:
        assert not has_option("json", _field("only_option"), "id")

    def test_no_annotation(self) -> None:
        assert not has_option("cmp", _field("plain"), "id")
