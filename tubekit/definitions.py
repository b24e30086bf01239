"""Known stream formats and lookups by name or format code."""

from __future__ import annotations

from dataclasses import dataclass

EMPTY_DEFINITION_CODE = -1


@dataclass(frozen=True)
class VideoDefinition:
    """A stream format: a display name, a format code and whether it carries audio."""

    name: str
    code: int
    has_audio: bool = False

    def is_empty(self) -> bool:
        """True for the placeholder returned when a lookup finds nothing."""
        return self.code == EMPTY_DEFINITION_CODE and not self.name


EMPTY_DEFINITION = VideoDefinition("", EMPTY_DEFINITION_CODE)

# The preferred equivalent format is listed last: lookups scan from the end.
_DEFINITIONS: tuple[VideoDefinition, ...] = (
    VideoDefinition("audio", 140),
    VideoDefinition("360p", 18, True),
    VideoDefinition("720p", 22, True),
)

_DEFINITION_NAMES: tuple[str, ...] = ("480p", "720p", "1080p", "1440p", "2160p")


def definitions() -> tuple[VideoDefinition, ...]:
    """All known stream formats, least preferred first."""
    return _DEFINITIONS


def definition_names() -> tuple[str, ...]:
    """The resolution names offered to the user."""
    return _DEFINITION_NAMES


def for_name(name: str) -> VideoDefinition:
    """The last known definition called ``name``, or the empty definition."""
    return next((d for d in reversed(_DEFINITIONS) if d.name == name), EMPTY_DEFINITION)


def for_code(code: int) -> VideoDefinition:
    """The last known definition with format ``code``, or the empty definition."""
    return next((d for d in reversed(_DEFINITIONS) if d.code == code), EMPTY_DEFINITION)