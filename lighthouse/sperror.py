"""Structured errors with localized messages, severity levels and wrap chains."""

from __future__ import annotations

import hashlib
import json
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lighthouse.langs import EN, RU
from lighthouse.levels import Level

_EMPTY_ERROR = "do not use empty sperror: it may cause misunderstandings"
_NOT_VALIDATED = "source error is not validated through done()"

_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


class ValidationError(ValueError):
    """Raised when an error lacks what it needs to be finalized or compared."""


def _content_digest(desc: str, hint: str, en_message: str) -> bytes:
    return hashlib.sha256((desc + hint + en_message).encode("utf-8")).digest()


def _as_level(value: int) -> Level | int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"invalid level: {value!r}")
    try:
        return Level(value)
    except ValueError:
        if not 0 <= value <= 255:
            raise ValueError(f"level out of range: {value}") from None
        return value


def _location(frame) -> str:
    return f"{os.path.abspath(frame.f_code.co_filename)}:{frame.f_lineno}"


@dataclass
class ErrSpec:
    """The fields from which a finalized SpError is built."""

    messages: dict[str, str] = field(default_factory=dict)
    desc: str = ""
    hint: str = ""
    http_code: int = 0
    level: int = Level.NOOP
    cause: BaseException | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def digest(self) -> bytes:
        """Content hash identifying errors built from this spec."""
        return _content_digest(self.desc, self.hint, (self.messages or {}).get(EN, ""))


INTERNAL_SPEC = ErrSpec(
    messages={EN: "Internal server error", RU: "Ошибка сервера"},
    desc="Internal server error. We are sorry for the inconvenience",
    hint="Please try again later - we are working on it",
    http_code=500,
    level=Level.HIGH_USER,
)


def _chain_contains(err, target) -> bool:
    """Whether ``target`` appears in the chain of ``err``.

    ``target`` may be an exception instance (matched by identity) or an
    exception class (matched with isinstance).
    """
    if err is None or target is None:
        return err is target
    seen: set[int] = set()
    pending = [err]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if current is target or (isinstance(target, type) and isinstance(current, target)):
            return True
        if isinstance(current, SpError):
            pending.append(current.cause)
            pending.append(current.underlying)
        else:
            pending.append(current.__cause__)
    return False


class SpError(Exception):
    """An error carrying localized messages, a description, a hint and metadata.

    Errors can be wrapped into chains; ``spin`` picks the member of a chain
    suitable for a given severity level.
    """

    def __init__(
        self,
        messages: dict[str, str] | None = None,
        desc: str = "",
        hint: str = "",
        http_code: int = 0,
        level: int = Level.NOOP,
        cause: BaseException | None = None,
        meta: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.messages = messages
        self.desc = desc
        self.hint = hint
        self.http_code = http_code
        self.level = _as_level(level)
        self.cause = cause
        self.meta = meta
        self.source = ""
        self.hash_id: bytes | None = None
        self.timestamp: datetime | None = None
        self.remains_underlying = 0
        self.underlying: SpError | None = None

    # construction and finalization

    @classmethod
    def from_spec(cls, spec: ErrSpec) -> SpError:
        """Build a finalized error from ``spec``, recording the caller as source."""
        return cls._build(spec, sys._getframe(1))

    @classmethod
    def _build(cls, spec: ErrSpec, frame) -> SpError:
        error = cls(
            messages=dict(spec.messages or {}),
            desc=spec.desc,
            hint=spec.hint,
            http_code=spec.http_code,
            level=spec.level,
            cause=spec.cause,
            meta=dict(spec.meta or {}),
        )
        error._mark(frame)
        error._finalize()
        return error

    def _mark(self, frame) -> None:
        if frame is not None:
            self.source = _location(frame)

    def _finalize(self) -> bytes:
        if not self.desc or not self.msg(EN):
            raise ValidationError(_EMPTY_ERROR)
        self.timestamp = datetime.now()
        self.hash_id = _content_digest(self.desc, self.hint, self.msg(EN))
        return self.hash_id

    def done(self) -> bytes:
        """Record the caller as source, finalize and return the hash id."""
        self._mark(sys._getframe(1))
        return self._finalize()

    def must_done(self) -> SpError:
        """Finalize, record the caller as source and return self."""
        self._finalize()
        self._mark(sys._getframe(1))
        return self

    def mark_source(self) -> SpError:
        """Record the caller's file and line as the source."""
        self._mark(sys._getframe(1))
        return self

    # accessors

    def msg(self, lang: str) -> str:
        """Message for ``lang``, or an empty string."""
        return (self.messages or {}).get(lang, "")

    def set_msg(self, lang: str, text: str) -> SpError:
        if self.messages is None:
            self.messages = {}
        self.messages[lang] = text
        return self

    def all_meta(self) -> dict[str, Any]:
        """A copy of the metadata."""
        return dict(self.meta or {})

    # comparison

    def matches(self, err) -> bool:
        """Whether ``err`` is this error's cause or found in the cause's chain."""
        return _chain_contains(self.cause, err)

    def deep_matches(self, err) -> bool:
        """Whether ``err`` is the cause of any error in the wrap chain."""
        chain = self.copy()
        for head in iter(chain.pop, None):
            if _chain_contains(head.cause, err):
                return True
        return False

    def same_as(self, other: SpError) -> bool:
        """Compare two errors by their hash ids."""
        if self.hash_id is None or other.hash_id is None:
            raise ValidationError(_NOT_VALIDATED)
        return self.hash_id == other.hash_id

    # chains

    def wrap(self, src: SpError) -> SpError:
        """Put ``src`` underneath this error unless both are the same error."""
        if self.same_as(src):
            return self
        self.underlying = src
        self.remains_underlying = src.remains_underlying + 1
        return self

    def pop(self) -> SpError | None:
        """Take the head of the chain, advancing this error to the next one."""
        if self.remains_underlying == -1:
            return None
        result = self.copy()
        result.underlying = None
        following = self.underlying
        if following is not None:
            self.__dict__.update(following.__dict__)
        else:
            self.remains_underlying -= 1
        return result

    def spin(self, level: int) -> SpError | None:
        """The deepest error of the chain whose level does not exceed ``level``.

        If the head itself is above ``level`` a generic internal error is
        returned; for ``Level.NOOP`` nothing is returned.
        """
        if level == Level.NOOP:
            return None
        chain = self.copy()
        current = chain.pop()
        if current is None:
            return None
        if current.level > level:
            return SpError.from_spec(INTERNAL_SPEC)
        last = current
        while current is not None and current.level <= level:
            last, current = current, chain.pop()
        return last

    def copy(self) -> SpError:
        """A shallow copy of this error."""
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        return clone

    # serialization

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "messages": None if self.messages is None else dict(self.messages),
            "description": self.desc,
            "hint": self.hint,
            "source": self.source,
        }
        if self.http_code:
            data["http_code"] = self.http_code
        data["level"] = int(self.level)
        if self.meta:
            data["meta"] = dict(self.meta)
        return data

    def to_json(self) -> str:
        text = json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
        return text.translate(_HTML_ESCAPES)

    @classmethod
    def from_json(cls, data: str | bytes) -> SpError:
        """Build an error from JSON; null fields and unknown keys are skipped."""
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        parsed = json.loads(data)
        error = cls()
        if parsed is None:
            return error
        if not isinstance(parsed, dict):
            raise ValueError("expected a JSON object")
        text_fields = {"description": "desc", "hint": "hint", "source": "source"}
        for key, value in parsed.items():
            if value is None:
                continue
            if key == "messages":
                if not isinstance(value, dict) or not all(
                    isinstance(text, str) for text in value.values()
                ):
                    raise ValueError("messages must map language codes to strings")
                if error.messages is None:
                    error.messages = {}
                error.messages.update(value)
            elif key in text_fields:
                if not isinstance(value, str):
                    raise ValueError(f"{key} must be a string")
                setattr(error, text_fields[key], value)
            elif key == "http_code":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError("http_code must be an integer")
                error.http_code = value
            elif key == "level":
                error.level = _as_level(value)
            elif key == "meta":
                if not isinstance(value, dict):
                    raise ValueError("meta must be an object")
                if error.meta is None:
                    error.meta = {}
                error.meta.update(value)
        return error

    def __str__(self) -> str:
        return f"{self.desc}: {self.hint}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(desc={self.desc!r}, level={self.level!r})"


def wrap(src: SpError, dst: ErrSpec | SpError) -> SpError:
    """Wrap ``src`` into a new error built from a spec, or into an existing error.

    ``src`` is returned unchanged when ``dst`` describes the same error.
    """
    if isinstance(dst, ErrSpec):
        if src.hash_id is None:
            raise ValidationError(_NOT_VALIDATED)
        if src.hash_id == dst.digest():
            return src
        result = SpError._build(dst, sys._getframe(1))
        result.underlying = src
        result.remains_underlying = src.remains_underlying + 1
        result._finalize()
        return result
    if isinstance(dst, SpError):
        if src.same_as(dst):
            return src
        dst.underlying = src
        dst.remains_underlying = src.remains_underlying + 1
        return dst
    raise TypeError("unsupported destination type")


def cast(err) -> SpError | None:
    """Return ``err`` if it is an SpError, otherwise None."""
    return err if isinstance(err, SpError) else None