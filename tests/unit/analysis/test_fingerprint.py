"""Tests for the schema fingerprint engine."""

from __future__ import annotations

import pytest

from sleuth.analysis.fingerprint import (
    build_fingerprint,
    cell_type,
    csv_fingerprint,
    json_fingerprint,
    xml_fingerprint,
    yaml_fingerprint,
)


class TestJsonFingerprint:
    def test_array_with_missing_key(self):
        fp = json_fingerprint([{"a": 1}, {"a": 2, "b": "x"}], sample_size=10)
        assert set(fp.top_level_keys) == {"a", "b"}
        assert fp.data_types["a"] == ("number",)
        assert fp.data_types["b"] == ("string",)
        assert fp.record_count == 2
        assert len(fp.issues) == 1
        assert "Missing key" in fp.issues[0]

    def test_record_count_is_full_length_but_keys_are_sampled(self):
        records = [{"a": i} for i in range(20)] + [{"late": True}]
        fp = json_fingerprint(records, sample_size=5)
        assert fp.record_count == 21
        assert fp.top_level_keys == ("a",)
        assert "late" not in fp.data_types

    def test_single_object(self):
        fp = json_fingerprint({"name": "x", "tags": [], "meta": {}, "n": None, "ok": True})
        assert fp.record_count == 1
        assert fp.top_level_keys == ("name", "tags", "meta", "n", "ok")
        assert fp.data_types == {
            "name": ("string",),
            "tags": ("array",),
            "meta": ("object",),
            "n": ("empty",),
            "ok": ("boolean",),
        }

    def test_non_object_elements_flagged(self):
        fp = json_fingerprint([{"a": 1}, 3, "x"])
        assert "Array contains non-object elements" in fp.issues
        assert fp.top_level_keys == ("a",)

    def test_mixed_types_accumulate_in_order(self):
        fp = json_fingerprint([{"v": 1}, {"v": "one"}, {"v": 2}])
        assert fp.data_types["v"] == ("number", "string")

    def test_scalar_yields_empty_fingerprint(self):
        fp = json_fingerprint(42)
        assert fp.top_level_keys == ()
        assert fp.record_count is None
        assert fp.issues == ()

    def test_non_string_keys_are_stringified(self):
        fp = json_fingerprint([{1: 2, None: "x"}])
        assert fp.top_level_keys == ("1", "None")
        assert fp.data_types == {"1": ("number",), "None": ("string",)}

    def test_traversal_fault_becomes_single_issue(self):
        class UnsliceableRecords(list):
            def __getitem__(self, index):
                raise RuntimeError("boom")

        fp = json_fingerprint(UnsliceableRecords([{"a": 1}]))
        assert fp.file_type == "json"
        assert fp.issues == ("Failed to analyze json schema",)

    def test_unprintable_key_falls_back_to_issue_only(self):
        class UnprintableKey:
            def __str__(self):
                raise RuntimeError("no text")

        fp = json_fingerprint({UnprintableKey(): 1})
        assert fp.file_type == "json"
        assert fp.top_level_keys == ()
        assert fp.issues == ("Failed to analyze json schema",)


class TestCsvFingerprint:
    def test_headers_and_types(self):
        fp = csv_fingerprint("id,name,active\n1,alice,true\n2,bob,false\n")
        assert fp.column_headers == ("id", "name", "active")
        assert fp.record_count == 2
        assert fp.data_types["id"] == ("number",)
        assert fp.data_types["name"] == ("string",)
        assert fp.data_types["active"] == ("boolean",)
        assert fp.issues == ()

    def test_inconsistent_columns_reported_once(self):
        fp = csv_fingerprint("a,b,c\n1,2\n1,2,3,4\n")
        assert fp.issues == ("Inconsistent column count: expected 3, found 2",)

    def test_short_rows_count_as_empty(self):
        fp = csv_fingerprint("a,b\n1\n")
        assert fp.data_types["b"] == ("empty",)

    def test_quoted_commas_are_split_naively(self):
        fp = csv_fingerprint('name,city\n"Doe, John",Paris\n')
        assert fp.issues == ("Inconsistent column count: expected 2, found 3",)

    def test_empty_content(self):
        fp = csv_fingerprint("")
        assert fp.column_headers == ()
        assert fp.record_count is None

    def test_accepts_line_sequence(self):
        fp = csv_fingerprint(["x,y", "1,2"])
        assert fp.column_headers == ("x", "y")
        assert fp.record_count == 1


class TestXmlFingerprint:
    def test_distinct_tags_in_order(self):
        fp = xml_fingerprint("<root><item id='1'/><item/><ns:meta>x</ns:meta></root>")
        assert fp.tag_names == ("root", "item", "ns:meta")

    def test_malformed_still_scanned(self):
        fp = xml_fingerprint("<a><b></a>")
        assert fp.tag_names == ("a", "b")
        assert fp.issues == ()


class TestYamlFingerprint:
    def test_top_level_mapping(self):
        content = "# config\nname: app\nport: 8080\ndebug: false\nservers:\n  - a\n  - b\n"
        fp = yaml_fingerprint(content)
        assert fp.top_level_keys == ("name", "port", "debug", "servers")
        assert fp.data_types["port"] == ("number",)
        assert fp.data_types["debug"] == ("boolean",)
        assert fp.data_types["servers"] == ("object",)
        assert fp.record_count == 1

    def test_top_level_sequence_of_mappings(self):
        content = "- name: a\n  size: 1\n- name: b\n"
        fp = yaml_fingerprint(content)
        assert fp.record_count == 2
        assert fp.top_level_keys == ("name", "size")
        assert fp.data_types["size"] == ("number",)
        assert fp.issues == ("Missing key 'size' in some records",)

    def test_parsed_structure_follows_json_rules(self):
        fp = yaml_fingerprint([{"a": 1}, {"a": 2}])
        assert fp.file_type == "yaml"
        assert fp.record_count == 2
        assert fp.data_types["a"] == ("number",)

    def test_parsed_mapping_with_non_string_keys(self):
        fp = yaml_fingerprint({1: "a", None: "b", "name": 3})
        assert fp.file_type == "yaml"
        assert fp.top_level_keys == ("1", "None", "name")
        assert fp.data_types["name"] == ("number",)
        assert fp.issues == ()


class TestBuildFingerprint:
    def test_dispatches_json_text(self):
        fp = build_fingerprint('[{"a": 1}]', "json")
        assert fp.top_level_keys == ("a",)

    def test_invalid_json_becomes_issue(self):
        fp = build_fingerprint("{not json", "json")
        assert fp.issues == ("Unable to parse JSON content",)
        assert fp.top_level_keys == ()

    def test_deeply_nested_json_becomes_issue(self):
        fp = build_fingerprint("[" * 100_000, "json")
        assert fp.issues == ("Unable to parse JSON content",)

    def test_unsupported_type(self):
        fp = build_fingerprint("a=b", "ini")
        assert fp.issues == ("Unsupported file type: ini",)

    def test_context_uses_camel_case_and_omits_empty(self):
        context = build_fingerprint("a,b\n1,2\n", "csv").to_context()
        assert context["columnHeaders"] == ("a", "b")
        assert context["recordCount"] == 1
        assert "tagNames" not in context


def test_cell_type():
    assert cell_type("  ") == "empty"
    assert cell_type("3.5") == "number"
    assert cell_type("TRUE") == "boolean"
    assert cell_type("abc") == "string"


@pytest.mark.parametrize("cell", ["Nan", "nan", "Inf", "infinity", "Infinity", "-inf", "1_000", "1e", "."])
def test_cell_type_rejects_python_only_numerals(cell):
    assert cell_type(cell) == "string"


@pytest.mark.parametrize("cell", ["-3.5e2", "+1", ".5", "7.", "1E10", "0x1F", "0b101", "0o17"])
def test_cell_type_accepts_plain_numerals(cell):
    assert cell_type(cell) == "number"
