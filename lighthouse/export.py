"""Export structured errors as JSON, CSV or XML."""

from __future__ import annotations

import csv
import io
from dataclasses import astuple, dataclass, fields

from lighthouse.langs import EN
from lighthouse.sperror import SpError

XML = "application/xml"
JSON = "application/json"
CSV = "text/csv"

_XML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
        "'": "&#39;",
        "\t": "&#x9;",
        "\n": "&#xA;",
        "\r": "&#xD;",
    }
)


@dataclass
class ExportedError:
    """Flat textual view of an error for tabular and XML export."""

    msg: str = ""
    desc: str = ""
    hint: str = ""
    time: str = ""
    path: str = ""
    level: str = ""
    cause: str = ""

    @classmethod
    def from_error(cls, error: SpError) -> ExportedError:
        return cls(
            msg=error.msg(EN),
            desc=error.desc,
            hint=error.hint,
            time="" if error.timestamp is None else str(error.timestamp),
            path=error.source,
            cause="" if error.cause is None else str(error.cause),
        )

    def to_xml(self) -> str:
        parts = [
            f"<{f.name}>{getattr(self, f.name).translate(_XML_ESCAPES)}</{f.name}>"
            for f in fields(self)
            if getattr(self, f.name)
        ]
        return f"<Error>{''.join(parts)}</Error>"


def to_json(error: SpError) -> bytes:
    return error.to_json().encode("utf-8")


def to_csv(*errors: SpError) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([f.name for f in fields(ExportedError)])
    writer.writerows(astuple(ExportedError.from_error(e)) for e in errors)
    return buffer.getvalue().encode("utf-8")


def to_xml(*errors: SpError) -> bytes:
    return "".join(ExportedError.from_error(e).to_xml() for e in errors).encode("utf-8")


def export(content_type: str, *errors: SpError) -> bytes:
    """Export in the given content type; anything unknown exports the first error as JSON."""
    if content_type == XML:
        return to_xml(*errors)
    if content_type == CSV:
        return to_csv(*errors)
    if not errors:
        raise ValueError("no error to export")
    return to_json(errors[0])