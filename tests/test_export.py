import csv
import io
import json
import xml.etree.ElementTree as ET

import pytest

from lighthouse.export import CSV, JSON, XML, ExportedError, export, to_csv, to_json, to_xml
from lighthouse.langs import EN
from lighthouse.registry import INTERNAL, REGISTRY
from lighthouse.sperror import SpError

HEADER = ["msg", "desc", "hint", "time", "path", "level", "cause"]


def _rows(data):
    return list(csv.reader(io.StringIO(data.decode("utf-8"))))


def test_csv_internal():
    rows = _rows(to_csv(REGISTRY.get(INTERNAL)))
    assert rows[0] == HEADER
    row = dict(zip(HEADER, rows[1]))
    assert row["msg"] == "Internal server error"
    assert row["desc"] == "Internal server error. We are sorry for the inconvenience"
    assert row["level"] == ""
    assert row["cause"] == ""
    assert len(rows) == 2


def test_xml_internal():
    data = to_xml(REGISTRY.get(INTERNAL))
    assert data.startswith(b"<Error><msg>Internal server error</msg>")
    root = ET.fromstring(b"<root>" + data + b"</root>")
    element = root.find("Error")
    assert element.findtext("hint") == "Please try again later - we are working on it"
    assert element.find("level") is None
    assert element.find("cause") is None


def test_xml_escaping():
    error = SpError(messages={EN: "m"}, desc='a<b & "c"', hint="h")
    assert b"<desc>a&lt;b &amp; &#34;c&#34;</desc>" in to_xml(error)


def test_cause_is_exported():
    error = SpError(messages={EN: "m"}, desc="d", hint="h", cause=ValueError("boom"))
    assert ExportedError.from_error(error).cause == "boom"
    assert dict(zip(HEADER, _rows(to_csv(error))[1]))["cause"] == "boom"


def test_csv_multiple_and_empty():
    first = SpError(messages={EN: "one"}, desc="d1")
    second = SpError(messages={EN: "two"}, desc="d2")
    rows = _rows(to_csv(first, second))
    assert [row[0] for row in rows[1:]] == ["one", "two"]
    assert _rows(to_csv()) == [HEADER]
    assert to_xml() == b""


def test_export_dispatch():
    error = REGISTRY.get(INTERNAL)
    assert export(XML, error) == to_xml(error)
    assert export(CSV, error) == to_csv(error)
    assert export(JSON, error) == to_json(error)
    assert json.loads(export("text/plain", error))["http_code"] == 500


def test_export_json_without_errors():
    with pytest.raises(ValueError):
        export(JSON)