"""Severity levels for structured errors."""

from enum import IntEnum


class Level(IntEnum):
    """Power-of-two weight of an error: how severe and how hard to handle it is.

    Lower values are aimed at users, higher values at developers.
    """

    DEEP_DEBUG = 255
    MEDIUM_DEBUG = 128
    HIGH_DEBUG = 64
    ERROR = 32
    WARN = 16
    INFO = 8
    LOW_USER = 4
    MEDIUM_USER = 2
    HIGH_USER = 1
    NOOP = 0