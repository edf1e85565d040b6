import io
import json

import pytest

from clauseflags.completion.fields import (
    data_format,
    extract_fields,
    is_data_file,
    iter_json_array,
    iter_records,
    sample_field_values,
)


def test_sampling_keeps_first_seen_order(cities_csv):
    values = sample_field_values(str(cities_csv), "city", max_values=10)

    assert values == ["New York", "Chicago"]


def test_sampling_stops_at_value_cap(tmp_path):
    path = tmp_path / "letters.csv"
    path.write_text("letter\n" + "\n".join("abcdefgh") + "\n", encoding="utf-8")

    assert sample_field_values(str(path), "letter", max_values=3) == ["a", "b", "c"]


def test_sampling_stops_at_record_cap(tmp_path):
    path = tmp_path / "letters.csv"
    path.write_text("letter\na\na\na\nb\nc\n", encoding="utf-8")

    assert sample_field_values(str(path), "letter", max_values=10, max_records=4) == ["a", "b"]


def test_sampling_skips_empty_values(tmp_path):
    path = tmp_path / "gaps.csv"
    path.write_text("name,city\nA,\nB,Oslo\nC,  \n", encoding="utf-8")

    assert sample_field_values(str(path), "city") == ["Oslo"]


def test_sampling_unknown_csv_field(cities_csv):
    with pytest.raises(KeyError):
        sample_field_values(str(cities_csv), "country")


def test_sampling_jsonl_stringifies_values(tmp_path):
    path = tmp_path / "events.jsonl"
    lines = [{"code": 200}, {"code": 404}, {"code": 200}, {"other": 1}, {"code": True}]
    path.write_text("\n".join(json.dumps(line) for line in lines) + "\n", encoding="utf-8")

    assert sample_field_values(str(path), "code") == ["200", "404", "true"]


def test_record_cap_counts_malformed_jsonl_lines(tmp_path):
    path = tmp_path / "noisy.jsonl"
    path.write_text("not json\n" * 5 + json.dumps({"city": "Oslo"}) + "\n", encoding="utf-8")

    assert sample_field_values(str(path), "city", max_records=3) == []
    assert sample_field_values(str(path), "city", max_records=6) == ["Oslo"]


def test_record_cap_counts_non_object_json_elements(tmp_path):
    path = tmp_path / "mixed.json"
    path.write_text(json.dumps([1, 1, 1, 1, 1, {"city": "Oslo"}]), encoding="utf-8")

    assert sample_field_values(str(path), "city", max_records=3) == []
    assert sample_field_values(str(path), "city", max_records=6) == ["Oslo"]


@pytest.mark.parametrize(
    "name,expected",
    [
        ("a.csv", "csv"),
        ("a.TSV", "tsv"),
        ("a.jsonl", "jsonl"),
        ("a.ndjson", "jsonl"),
        ("a.json", "json"),
        ("a.log", "csv"),
    ],
)
def test_data_format(name, expected):
    assert data_format(name) == expected


def test_is_data_file():
    assert is_data_file("x/y/report.JSON")
    assert not is_data_file("notes.txt")


def test_extract_fields_csv_and_tsv(tmp_path):
    csv_path = tmp_path / "people.csv"
    csv_path.write_text("id, name ,city\n1,a,b\n", encoding="utf-8")
    tsv_path = tmp_path / "people.tsv"
    tsv_path.write_text("id\tname\n1\ta\n", encoding="utf-8")

    assert extract_fields(str(csv_path)) == ["id", "name", "city"]
    assert extract_fields(str(tsv_path)) == ["id", "name"]


def test_extract_fields_json_array_keeps_key_order(tmp_path):
    path = tmp_path / "rows.json"
    path.write_text('[{"zeta": 1, "alpha": 2}, {"beta": 3}]', encoding="utf-8")

    assert extract_fields(str(path)) == ["zeta", "alpha"]


def test_extract_fields_single_json_object(tmp_path):
    path = tmp_path / "row.json"
    path.write_text('  {"b": 1, "a": 2}', encoding="utf-8")

    assert extract_fields(str(path)) == ["b", "a"]


def test_extract_fields_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    assert extract_fields(str(path)) == []


def test_iter_json_array_streams_across_chunks():
    handle = io.StringIO('[ {"a": 1}, {"a": [2, 3]} , "text", 12345 ]')

    assert list(iter_json_array(handle, chunk_size=4)) == [
        {"a": 1},
        {"a": [2, 3]},
        "text",
        12345,
    ]


def test_iter_json_array_rejects_non_array():
    with pytest.raises(ValueError):
        list(iter_json_array(io.StringIO('{"a": 1}')))


def test_iter_records_skips_non_objects(tmp_path):
    path = tmp_path / "mixed.json"
    path.write_text('[{"a": 1}, 2, {"a": 3}]', encoding="utf-8")

    assert list(iter_records(str(path))) == [{"a": 1}, {"a": 3}]
