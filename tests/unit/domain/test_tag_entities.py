"""Unit tests for tag entities and the tag reference adapter."""

import pytest

from core.exceptions import InvalidTagFormatError, InvalidTagReferenceError
from domain.entities.tag import (
    TAG_PREFIX_LABELS,
    TAG_PREFIXES,
    TagDefinition,
    TagReference,
    build_full_tag,
    generate_tag_id,
    is_valid_code,
    is_valid_prefix,
    load_tag_references,
    parse_full_tag,
)


class TestFullTag:
    def test_build(self):
        assert build_full_tag("categoria-di-sconto", "sconto-45") == "categoria-di-sconto:sconto-45"

    def test_parse(self):
        assert parse_full_tag("categoria-di-sconto:sconto-45") == (
            "categoria-di-sconto",
            "sconto-45",
        )

    def test_parse_splits_on_first_colon(self):
        assert parse_full_tag("a:b:c") == ("a", "b:c")

    @pytest.mark.parametrize("value", ["", "no-colon", ":code", "prefix:"])
    def test_parse_rejects_missing_side(self, value: str):
        assert parse_full_tag(value) is None


class TestFormatValidation:
    @pytest.mark.parametrize("value", ["sconto", "sconto-45", "a1-b2-c3", "45"])
    def test_accepts_kebab_case(self, value: str):
        assert is_valid_prefix(value)
        assert is_valid_code(value)

    @pytest.mark.parametrize(
        "value", ["", "Sconto", "-sconto", "sconto-", "sconto--45", "sconto_45", "a:b", "a b"]
    )
    def test_rejects_other_formats(self, value: str):
        assert not is_valid_prefix(value)
        assert not is_valid_code(value)


class TestTagDefinition:
    def test_full_tag_and_defaults(self):
        tag = TagDefinition(prefix="categoria-clienti", code="idraulico")

        assert tag.full_tag == "categoria-clienti:idraulico"
        assert tag.is_active
        assert tag.customer_count == 0
        assert tag.tag_id.startswith("ctag_")

    def test_invalid_prefix_names_field(self):
        with pytest.raises(InvalidTagFormatError) as exc_info:
            TagDefinition(prefix="Categoria", code="idraulico")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": "prefix", "value": "Categoria"}

    def test_invalid_code_names_field(self):
        with pytest.raises(InvalidTagFormatError) as exc_info:
            TagDefinition(prefix="categoria-clienti", code="idraulico-")

        assert exc_info.value.details["field"] == "code"

    def test_color_is_upper_cased(self):
        tag = TagDefinition(prefix="categoria-clienti", code="idraulico", color="#3b82f6")

        assert tag.color == "#3B82F6"

    def test_to_reference_copies_identity(self):
        tag = TagDefinition(prefix="categoria-clienti", code="idraulico", tag_id="ctag_abc")

        assert tag.to_reference() == TagReference(
            tag_id="ctag_abc",
            full_tag="categoria-clienti:idraulico",
            prefix="categoria-clienti",
            code="idraulico",
        )

    def test_generated_ids_differ(self):
        assert generate_tag_id() != generate_tag_id()


class TestTagReferenceAdapter:
    def test_structured_dict(self):
        result = TagReference.from_raw(
            {
                "tag_id": "ctag_1",
                "full_tag": "categoria-clienti:idraulico",
                "prefix": "categoria-clienti",
                "code": "idraulico",
            }
        )

        assert result.tag_id == "ctag_1"
        assert result.full_tag == "categoria-clienti:idraulico"

    def test_legacy_field_names(self):
        result = TagReference.from_raw({"_id": "ctag_2", "tag": "categoria-di-sconto:sconto-45"})

        assert result == TagReference(
            tag_id="ctag_2",
            full_tag="categoria-di-sconto:sconto-45",
            prefix="categoria-di-sconto",
            code="sconto-45",
        )

    def test_legacy_name_and_id(self):
        result = TagReference.from_raw({"id": "ctag_3", "name": "categoria-clienti:elettricista"})

        assert result.tag_id == "ctag_3"
        assert result.code == "elettricista"

    def test_bare_string(self):
        result = TagReference.from_raw("categoria-clienti:idraulico")

        assert result.tag_id == ""
        assert result.prefix == "categoria-clienti"
        assert result.code == "idraulico"

    def test_prefix_and_code_without_full_tag(self):
        result = TagReference.from_raw({"prefix": "categoria-clienti", "code": "idraulico"})

        assert result.full_tag == "categoria-clienti:idraulico"

    def test_existing_reference_passes_through(self):
        ref = TagReference.from_raw("categoria-clienti:idraulico")

        assert TagReference.from_raw(ref) is ref

    @pytest.mark.parametrize("value", ["no-colon", {"tag_id": "ctag_1"}, 42, None])
    def test_uninterpretable_values_raise(self, value: object):
        with pytest.raises(InvalidTagReferenceError):
            TagReference.from_raw(value)

    def test_round_trips_through_dict(self):
        ref = TagReference.from_raw({"_id": "ctag_2", "tag": "categoria-di-sconto:sconto-45"})

        assert TagReference.from_raw(ref.to_dict()) == ref

    def test_load_handles_none_and_mixed_lists(self):
        assert load_tag_references(None) == []

        result = load_tag_references(
            ["categoria-clienti:idraulico", {"id": "ctag_2", "tag": "categoria-di-sconto:sconto-45"}]
        )

        assert [r.full_tag for r in result] == [
            "categoria-clienti:idraulico",
            "categoria-di-sconto:sconto-45",
        ]

    def test_load_skips_uninterpretable_entries(self):
        result = load_tag_references(
            ["categoria-clienti:idraulico", "legacy-tag-without-prefix", {"tag_id": "ctag_1"}, 42],
            owner="customer:1",
        )

        assert [r.full_tag for r in result] == ["categoria-clienti:idraulico"]
        assert result[0].tag_id == ""


class TestWellKnownPrefixes:
    def test_every_prefix_has_a_label(self):
        assert set(TAG_PREFIXES) == set(TAG_PREFIX_LABELS)
        assert "categoria-di-sconto" in TAG_PREFIXES
        assert all(is_valid_prefix(p) for p in TAG_PREFIXES)
