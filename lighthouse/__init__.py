"""Structured, layered errors with localized messages, export formats and logging hooks."""

__version__ = "0.1.0"

__all__ = [
    "app",
    "bot",
    "export",
    "hooks",
    "kibana",
    "langs",
    "levels",
    "logger",
    "registry",
    "sperror",
]