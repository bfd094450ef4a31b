"""Notification bot attached to a lighthouse."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Bot:
    """A messenger bot; it carries no settings yet."""