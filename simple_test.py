"""
Tests for the comparison core: normalizer, loader, schema check and differ.
"""

import pandas as pd
import pytest

from csvcompare.config import REJECT
from csvcompare.differ import compare, diff
from csvcompare.errors import EmptyFileError, NoColumnsError, ParseError, SchemaMismatchError
from csvcompare.models import MissingSide
from csvcompare.schema_check import check_compatible, describe_schema_difference
from csvcompare.table_loader import detect_delimiter, load_file, load_table, parse_csv
from csvcompare.table_normalizer import TableNormalizer, normalize, normalize_value


def make_table(headers, rows, name="data.csv"):
    return normalize(rows, headers, name)


# Normalizer

def test_normalize_value():
    assert normalize_value(None) == ""
    assert normalize_value(float("nan")) == ""
    assert normalize_value("  x ") == "x"
    assert normalize_value(30) == "30"


def test_trims_values_and_defaults_missing():
    table = normalize([{"name": " Al ", "age": None}], ["name", "age"], "a.csv")
    assert table.headers == ("name", "age")
    assert table.rows == ({"name": "Al", "age": ""},)
    assert table.source_name == "a.csv"


def test_absent_keys_default_to_empty():
    table = normalize([{"name": "Al"}], ["name", "age"], "a.csv")
    assert table.rows[0] == {"name": "Al", "age": ""}


def test_blank_rows_are_dropped():
    rows = [{"name": "Al", "age": "30"}, {"name": "  ", "age": ""}, {"name": None, "age": None}]
    table = normalize(rows, ["name", "age"], "a.csv")
    assert table.row_count == 1
    assert all(any(record.values()) for record in table.rows)


def test_headers_trimmed_and_empty_dropped():
    table = normalize([{" name ": "Al", "": "x", "age": "1"}], [" name ", "", "age"], "a.csv")
    assert table.headers == ("name", "age")
    assert table.rows[0] == {"name": "Al", "age": "1"}


def test_no_columns():
    with pytest.raises(NoColumnsError):
        normalize([{"": "x"}], ["", "   "], "a.csv")


def test_no_rows():
    with pytest.raises(EmptyFileError):
        normalize([{"name": " "}], ["name"], "a.csv")
    with pytest.raises(EmptyFileError):
        normalize([], ["name"], "a.csv")


def test_duplicate_headers_collapse_last_value_wins():
    rows = [{"name": "first", " name ": "second", "age": "1"}]
    table = normalize(rows, ["name", " name ", "age"], "a.csv")
    assert table.headers == ("name", "age")
    assert table.rows[0]["name"] == "second"


def test_duplicate_headers_rejected_by_policy():
    normalizer = TableNormalizer(duplicate_headers=REJECT)
    with pytest.raises(ParseError):
        normalizer.normalize([{"name": "a", "name ": "b"}], ["name", "name "], "a.csv")


def test_normalize_is_idempotent():
    rows = [{"name": " Al ", "age": None}, {"name": "Bo", "age": " 4"}]
    assert normalize(rows, ["name", "age"], "a.csv") == normalize(rows, ["name", "age"], "a.csv")


def test_normalize_does_not_mutate_input():
    rows = [{"name": " Al "}]
    normalize(rows, ["name"], "a.csv")
    assert rows == [{"name": " Al "}]


# Loader

def test_load_csv_bytes():
    table = load_table(b"name,age\nAl,30\n,\nBo,31\n", "people.csv")
    assert table.headers == ("name", "age")
    assert table.rows == ({"name": "Al", "age": "30"}, {"name": "Bo", "age": "31"})


def test_load_keeps_header_text_verbatim():
    table = load_table(b"name,,age\nAl,x,30\n", "people.csv")
    assert table.headers == ("name", "age")


def test_load_short_rows_padded():
    table = load_table(b"name,age\nAl\n", "people.csv")
    assert table.rows[0] == {"name": "Al", "age": ""}


def test_load_semicolon_delimited():
    table = load_table(b"name;age\nAl;30\nBo;31\nCy;32\n", "people.csv")
    assert table.headers == ("name", "age")
    assert table.rows[2] == {"name": "Cy", "age": "32"}


def test_load_dataframe():
    df = pd.DataFrame({"name": [" Al ", None], "age": [None, None]})
    table = load_table(df, "frame.csv")
    assert table.rows == ({"name": "Al", "age": ""},)


def test_detect_delimiter_falls_back_to_comma():
    assert detect_delimiter("") == ","


def test_rejects_non_csv_name():
    with pytest.raises(ParseError, match="CSV file"):
        load_table(b"name\nAl\n", "notes.txt")


def test_empty_content_has_no_columns():
    with pytest.raises(NoColumnsError):
        parse_csv(b"", "empty.csv")


def test_header_only_file_is_empty():
    with pytest.raises(EmptyFileError):
        load_table(b"name,age\n", "people.csv")


def test_malformed_rows_raise_parse_error():
    with pytest.raises(ParseError):
        load_table(b"a,b\n1,2\n1,2,3\n", "bad.csv")


def test_undecodable_content_raises_parse_error():
    with pytest.raises(ParseError):
        parse_csv(b"name\n\xff\xfe\xfa\n", "bad.csv", encoding="utf-8")


# Schema check

def test_schema_check_ignores_order():
    a = make_table(["name", "age"], [{"name": "Al", "age": "1"}])
    b = make_table(["age", "name"], [{"name": "Al", "age": "1"}])
    check_compatible(a, b)
    check_compatible(b, a)


def test_schema_check_is_symmetric():
    a = make_table(["name", "age"], [{"name": "Al", "age": "1"}])
    b = make_table(["name", "city"], [{"name": "Al", "city": "X"}])
    with pytest.raises(SchemaMismatchError) as first:
        check_compatible(a, b)
    with pytest.raises(SchemaMismatchError) as second:
        check_compatible(b, a)
    assert first.value.only_in_first == ["age"]
    assert first.value.only_in_second == ["city"]
    assert second.value.only_in_first == ["city"]


def test_schema_check_rejects_extra_column():
    a = make_table(["name"], [{"name": "Al"}])
    b = make_table(["name", "age"], [{"name": "Al", "age": "1"}])
    assert describe_schema_difference(a, b) == ([], ["age"])
    with pytest.raises(SchemaMismatchError):
        check_compatible(a, b)


# Differ

def test_single_changed_cell():
    a = make_table(["name", "age"], [{"name": "Al", "age": "30"}])
    b = make_table(["name", "age"], [{"name": "Al", "age": "31"}])
    result = compare(a, b)
    assert len(result) == 1
    row = result[0]
    assert row.row_index == 1
    assert row.line_number == 2
    assert row.cells["age"].is_different
    assert (row.cells["age"].left, row.cells["age"].right) == ("30", "31")
    assert row.cells["age"].missing_side is MissingSide.NONE
    assert not row.cells["name"].is_different
    assert row.changed_columns() == ["age"]


def test_row_missing_on_right():
    a = make_table(["name", "age"], [{"name": "Al", "age": "30"}])
    b = make_table(["name", "age"], [{"name": "Al", "age": "30"}, {"name": "Bo", "age": "4"}])
    result = compare(b, a)
    assert [row.row_index for row in result] == [2]
    for cell in result[0].cells.values():
        assert cell.is_different
        assert cell.missing_side is MissingSide.RIGHT
        assert cell.right == ""
    assert result[0].cells["name"].left == "Bo"
    assert result[0].is_missing


def test_missing_rows_on_left():
    a = make_table(["name"], [{"name": "a"}])
    b = make_table(["name"], [{"name": "a"}, {"name": "b"}, {"name": "c"}])
    result = compare(a, b)
    assert [row.row_index for row in result] == [2, 3]
    for row in result:
        for cell in row.cells.values():
            assert cell.missing_side is MissingSide.LEFT
            assert cell.left == ""
    assert result[1].cells["name"].right == "c"


def test_identical_tables_have_no_differences():
    rows = [{"name": f"n{i}", "age": str(i)} for i in range(5)]
    a = make_table(["name", "age"], rows)
    b = make_table(["name", "age"], rows)
    assert compare(a, b) == []


def test_mismatched_columns_produce_no_diff():
    a = make_table(["name", "age"], [{"name": "Al", "age": "30"}])
    b = make_table(["name", "city"], [{"name": "Al", "city": "X"}])
    with pytest.raises(SchemaMismatchError):
        compare(a, b)
    with pytest.raises(SchemaMismatchError):
        diff(a, b)


def test_equal_rows_are_suppressed():
    a = make_table(["k"], [{"k": "1"}, {"k": "2"}, {"k": "3"}])
    b = make_table(["k"], [{"k": "1"}, {"k": "x"}, {"k": "3"}])
    assert [row.row_index for row in compare(a, b)] == [2]


def test_output_uses_first_table_column_order():
    a = make_table(["name", "age"], [{"name": "Al", "age": "30"}])
    b = make_table(["age", "name"], [{"name": "Al", "age": "31"}])
    row = compare(a, b)[0]
    assert list(row.cells) == ["name", "age"]


def test_comparison_is_case_sensitive():
    a = make_table(["name"], [{"name": "al"}])
    b = make_table(["name"], [{"name": "Al"}])
    assert len(compare(a, b)) == 1


def test_inserted_row_cascades():
    a = make_table(["k"], [{"k": "1"}, {"k": "2"}, {"k": "3"}])
    b = make_table(["k"], [{"k": "0"}, {"k": "1"}, {"k": "2"}, {"k": "3"}])
    result = compare(a, b)
    assert [row.row_index for row in result] == [1, 2, 3, 4]
    assert result[-1].cells["k"].missing_side is MissingSide.LEFT


def test_compare_is_deterministic_and_pure():
    a = make_table(["k", "v"], [{"k": "1", "v": "a"}, {"k": "2", "v": "b"}])
    b = make_table(["k", "v"], [{"k": "1", "v": "z"}])
    snapshot = (a.rows, b.rows)
    assert compare(a, b) == compare(a, b)
    assert (a.rows, b.rows) == snapshot


def test_load_file_from_disk(tmp_path):
    path = tmp_path / "people.csv"
    path.write_bytes(b"name,age\nAl,30\n")
    table = load_file(path)
    assert table.source_name == "people.csv"
    assert table.rows == ({"name": "Al", "age": "30"},)


def test_load_missing_file_raises_parse_error(tmp_path):
    with pytest.raises(ParseError):
        load_file(tmp_path / "absent.csv")


def test_row_diff_cells_are_read_only():
    a = make_table(["name", "age"], [{"name": "Al", "age": "30"}])
    b = make_table(["name", "age"], [{"name": "Al", "age": "31"}])
    row = compare(a, b)[0]
    with pytest.raises(TypeError):
        row.cells["age"] = row.cells["name"]
    assert hash(row) == hash(compare(a, b)[0])
    assert row == compare(a, b)[0]
