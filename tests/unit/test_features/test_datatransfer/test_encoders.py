"""Tests for export record encoders."""

from __future__ import annotations

import csv
import io
import json
from types import SimpleNamespace

import pytest

from result_service.features.datatransfer import encoders
from result_service.features.datatransfer.exceptions import (
    ExportValidationError,
    MalformedRecordError,
)
from result_service.features.datatransfer.schemas import ExportFormat


def make_record(record_id: int, payload: dict[str, str] | str) -> SimpleNamespace:
    stored = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(id=record_id, result=stored)


def test_decode_payload_sorts_fields_by_name() -> None:
    record = make_record(1, '{"zeta": "z", "alpha": "a", "mid": "m"}')

    assert encoders.decode_payload(record) == [("alpha", "a"), ("mid", "m"), ("zeta", "z")]


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[1, 2]",
        '"text"',
        '{"count": 3}',
        '{"flag": true}',
        '{"nested": {"a": "b"}}',
        '{"items": ["a"]}',
    ],
)
def test_decode_payload_rejects_non_string_mappings(payload: str) -> None:
    with pytest.raises(MalformedRecordError) as exc_info:
        encoders.decode_payload(make_record(9, payload))

    assert exc_info.value.record_id == 9
    assert exc_info.value.status_code == 422
    assert exc_info.value.type == "malformed-record"


def test_decode_payload_reads_null_as_empty_string() -> None:
    record = make_record(1, '{"b": null, "a": "x"}')

    assert encoders.decode_payload(record) == [("a", "x"), ("b", "")]


def test_null_values_export_as_empty_strings() -> None:
    sql_buffer, csv_buffer = io.StringIO(), io.StringIO()
    record = make_record(1, '{"a": null, "b": "2"}')

    assert encoders.SQLEncoder("Proj").encode(record, sql_buffer) is True
    assert encoders.CSVEncoder().encode(record, csv_buffer) is True

    assert sql_buffer.getvalue() == "insert into t_proj(a,b) values ('','2');\n"
    assert csv_buffer.getvalue() == "a,b\n,2\n"


def test_sql_encoder_escapes_quotes_and_backslashes() -> None:
    encoder = encoders.SQLEncoder("Proj")
    buffer = io.StringIO()

    wrote = encoder.encode(make_record(1, {"a": "O'Brien", "b": "x\\y"}), buffer)

    assert wrote is True
    assert buffer.getvalue() == "insert into t_proj(a,b) values ('O''Brien','x\\\\y');\n"


def test_sql_encoder_orders_columns_regardless_of_stored_order() -> None:
    encoder = encoders.SQLEncoder("Shop")
    buffer = io.StringIO()

    encoder.encode(make_record(1, '{"price": "10", "name": "pen"}'), buffer)

    assert buffer.getvalue() == "insert into t_shop(name,price) values ('pen','10');\n"


def test_sql_encoder_skips_records_without_fields() -> None:
    encoder = encoders.SQLEncoder("Proj")
    buffer = io.StringIO()

    assert encoder.encode(make_record(1, "{}"), buffer) is False
    assert buffer.getvalue() == ""


def test_csv_encoder_writes_bom_preamble_and_single_header() -> None:
    encoder = encoders.CSVEncoder()
    first_page, second_page = io.StringIO(), io.StringIO()

    encoder.encode(make_record(1, {"b": "2", "a": "1"}), first_page)
    encoder.encode(make_record(2, {"a": "3", "b": "4"}), first_page)
    encoder.encode(make_record(3, {"b": "6", "a": "5"}), second_page)

    assert encoder.preamble() == "\ufeff"
    assert first_page.getvalue() == "a,b\n1,2\n3,4\n"
    assert second_page.getvalue() == "5,6\n"
    assert encoder.header_written is True


def test_csv_encoder_header_comes_from_first_non_empty_record() -> None:
    encoder = encoders.CSVEncoder()
    buffer = io.StringIO()

    assert encoder.encode(make_record(1, "{}"), buffer) is False
    assert encoder.header_written is False
    encoder.encode(make_record(2, {"title": "hello"}), buffer)

    assert buffer.getvalue() == "title\nhello\n"


def test_csv_encoder_rows_follow_their_own_fields() -> None:
    encoder = encoders.CSVEncoder()
    buffer = io.StringIO()

    encoder.encode(make_record(1, {"a": "1", "b": "2"}), buffer)
    encoder.encode(make_record(2, {"c": "3"}), buffer)

    assert buffer.getvalue().splitlines() == ["a,b", "1,2", "3"]


def test_csv_encoder_quotes_values_with_delimiters() -> None:
    encoder = encoders.CSVEncoder()
    buffer = io.StringIO()

    encoder.encode(make_record(1, {"note": 'says "hi", then\nleaves'}), buffer)

    rows = list(csv.reader(io.StringIO(buffer.getvalue())))
    assert rows == [["note"], ['says "hi", then\nleaves']]


def test_json_encoder_emits_stored_text_verbatim() -> None:
    encoder = encoders.JSONLinesEncoder()
    buffer = io.StringIO()
    stored = '{"b": "2",   "a":"1"}'

    assert encoder.encode(make_record(1, stored), buffer) is True
    assert encoder.encode(make_record(2, "{}"), buffer) is True

    lines = buffer.getvalue().split("\n")
    assert lines == [stored, "{}", ""]
    assert json.loads(lines[0]) == {"a": "1", "b": "2"}


def test_json_encoder_keeps_multiline_payloads_as_stored() -> None:
    encoder = encoders.JSONLinesEncoder()
    buffer = io.StringIO()
    stored = '{\n  "title": "a"\n}'

    encoder.encode(make_record(1, stored), buffer)

    assert buffer.getvalue() == stored + "\n"


def test_json_encoder_rejects_malformed_payloads() -> None:
    encoder = encoders.JSONLinesEncoder()
    buffer = io.StringIO()

    with pytest.raises(MalformedRecordError):
        encoder.encode(make_record(4, "{broken"), buffer)
    assert buffer.getvalue() == ""


def test_get_encoder_resolves_each_format() -> None:
    assert isinstance(encoders.get_encoder(ExportFormat.SQL, "P"), encoders.SQLEncoder)
    assert isinstance(encoders.get_encoder(ExportFormat.CSV, "P"), encoders.CSVEncoder)
    assert isinstance(encoders.get_encoder(ExportFormat.JSON, "P"), encoders.JSONLinesEncoder)
    assert encoders.get_encoder(ExportFormat.CSV, "P").file_extension == "csv"


def test_export_format_parse_is_case_insensitive() -> None:
    assert ExportFormat.parse("CSV") is ExportFormat.CSV
    assert ExportFormat.parse(" Json ") is ExportFormat.JSON
    assert ExportFormat.parse("sql") is ExportFormat.SQL


def test_export_format_parse_rejects_unknown_formats() -> None:
    with pytest.raises(ExportValidationError) as exc_info:
        ExportFormat.parse("xml")

    assert exc_info.value.status_code == 400
    assert exc_info.value.type == "unsupported-format"
    assert "xml" in exc_info.value.detail
