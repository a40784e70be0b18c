"""Fatal content errors.

Anything raised from here means the installation itself is broken (bad level
pack, foreign score file, unreadable config). These are never handled inside
the engine; ``pushbox.app.run`` reports them and exits.
"""

from __future__ import annotations


class ContentError(Exception):
    """Base class for operator-facing content and configuration errors."""


class LevelFileError(ContentError):
    """The level pack could not be read."""


class LevelFormatError(ContentError):
    """A level block is malformed."""

    def __init__(self, level: int, message: str) -> None:
        super().__init__(f"Level {level}: {message}")
        self.level = level


class ScoreFileError(ContentError):
    """The score file does not match the expected format."""

    def __init__(self, path: object, message: str) -> None:
        super().__init__(f"{message}. Please delete the scores file {path}.")
        self.path = path


class ConfigError(ContentError):
    """The configuration file is invalid."""
