"""Logging fields describing an error spun to a given level."""

from __future__ import annotations

from lighthouse.sperror import SpError


def _spun(error: SpError, level: int) -> SpError:
    spun = error.spin(level)
    if spun is None:
        raise ValueError(f"no error to report at level {level!r}")
    return spun


def zap_fields(error: SpError, level: int) -> dict[str, str]:
    """Fields desc, hint, path and time of the error chosen for ``level``."""
    spun = _spun(error, level)
    return {
        "desc": spun.desc,
        "hint": spun.hint,
        "path": spun.source,
        "time": "" if spun.timestamp is None else str(spun.timestamp),
    }


def slog_attrs(error: SpError, level: int) -> dict[str, str]:
    """Attributes desc, hint, source and err_time of the error chosen for ``level``."""
    spun = _spun(error, level)
    return {
        "desc": spun.desc,
        "hint": spun.hint,
        "source": spun.source,
        "err_time": "" if spun.timestamp is None else spun.timestamp.strftime("%Y.%m.%d %H:%M:%S"),
    }