"""Logger that understands structured errors, with pretty and JSON output."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from enum import Enum
from typing import Any, TextIO

from lighthouse.hooks import slog_attrs
from lighthouse.langs import EN
from lighthouse.sperror import SpError

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
}
_LEVEL_COLORS = {
    logging.DEBUG: 35,
    logging.INFO: 34,
    logging.WARNING: 33,
    logging.ERROR: 31,
}
_MESSAGE_COLOR = 36
_ATTRS_COLOR = 37
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Stage(str, Enum):
    LOCAL = "local"
    DEV = "dev"
    PROD = "prod"


def _level_name(levelno: int) -> str:
    return _LEVEL_NAMES.get(levelno) or logging.getLevelName(levelno)


def _paint(text: str, code: int, enabled: bool) -> str:
    return f"\x1b[{code}m{text}\x1b[0m" if enabled else text


def _attrs_of(record: logging.LogRecord) -> list[tuple[str, Any]]:
    return list(getattr(record, "attrs", ()))


def _caller(depth: int) -> str:
    frame = sys._getframe(depth + 1)
    return f"{os.path.abspath(frame.f_code.co_filename)}:{frame.f_lineno}"


def _attrs_from_args(args) -> list[tuple[str, Any]]:
    attrs: list[tuple[str, Any]] = []
    items = iter(args)
    for item in items:
        if isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str):
            attrs.append(item)
        elif isinstance(item, str):
            try:
                attrs.append((item, next(items)))
            except StopIteration:
                attrs.append(("!BADKEY", item))
        else:
            attrs.append(("!BADKEY", item))
    return attrs


def _wants_color(out) -> bool:
    isatty = getattr(out, "isatty", None)
    if isatty is None or not isatty():
        return False
    return os.environ.get("TERM") != "dumb" and "NO_COLOR" not in os.environ


class PrettyFormatter(logging.Formatter):
    """Human-readable single record: time, level, message and indented attributes."""

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = _level_name(record.levelno) + ":"
        code = _LEVEL_COLORS.get(record.levelno)
        if code is not None:
            level = _paint(level, code, self.color)
        attrs = _attrs_of(record)
        body = ("\n" + "\n".join(f"\t{key} = {value}" for key, value in attrs)) if attrs else ""
        stamp = datetime.fromtimestamp(record.created)
        when = f"[{_MONTHS[stamp.month - 1]} {stamp:%d - %H:%M:%S}]"
        return " ".join(
            [
                when,
                level,
                _paint(record.getMessage(), _MESSAGE_COLOR, self.color),
                _paint(body, _ATTRS_COLOR, self.color),
            ]
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per record with time, level, msg and the attributes."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": _level_name(record.levelno),
            "msg": record.getMessage(),
        }
        data.update(_attrs_of(record))
        return json.dumps(data, ensure_ascii=False, default=str)


class Logger:
    """Logs messages and errors; structured errors are spun to the requested level.

    The language selects which localized message of a structured error is logged.
    """

    def __init__(self, stage: str = Stage.LOCAL, lang: str = EN, out: TextIO | None = None):
        self.stage = stage
        self.lang = lang
        self._noop = False
        self._log = logging.Logger(f"lighthouse.{id(self)}")
        self._log.propagate = False
        handler = logging.StreamHandler(sys.stdout if out is None else out)
        if stage in (Stage.DEV, Stage.PROD):
            handler.setFormatter(JsonFormatter())
            self._log.setLevel(logging.ERROR)
        else:
            handler.setFormatter(PrettyFormatter(color=_wants_color(handler.stream)))
            self._log.setLevel(logging.DEBUG)
        self._log.addHandler(handler)

    @classmethod
    def noop(cls) -> Logger:
        """A logger that discards everything."""
        logger = cls.__new__(cls)
        logger.stage = ""
        logger.lang = ""
        logger._noop = True
        logger._log = None
        return logger

    def _emit(self, levelno: int, msg: str, attrs) -> None:
        self._log.log(levelno, msg, extra={"attrs": list(attrs)})

    def error(self, e: BaseException | None, level: int) -> None:
        """Log ``e``; structured errors are described as seen at ``level``."""
        if self._noop or e is None:
            return
        if not isinstance(e, SpError):
            self._emit(logging.ERROR, str(e), [("source", _caller(1))])
            return
        self._emit(logging.ERROR, e.msg(self.lang), slog_attrs(e, level).items())

    def debug(self, msg: str, *args) -> None:
        if self._noop:
            return
        attrs = _attrs_from_args(args)
        attrs.append(("log_at", _caller(1)))
        self._emit(logging.DEBUG, msg, attrs)

    def info(self, msg: str, *args) -> None:
        if self._noop:
            return
        self._emit(logging.INFO, msg, _attrs_from_args(args))