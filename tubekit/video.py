"""A single video and its metadata."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Callable

log = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v="


class License(IntEnum):
    YOUTUBE = 1
    CC = 2


@dataclass
class Video:
    """Metadata of one video plus the stream URLs once they are known."""

    title: str = ""
    description: str = ""
    channel_title: str = ""
    channel_id: str = ""
    webpage: str = ""
    stream_url: str = ""
    audio_stream_url: str = ""
    thumbnail: bytes | None = None
    thumbnail_url: str = ""
    medium_thumbnail_url: str = ""
    large_thumbnail_url: str = ""
    duration: int = 0
    formatted_duration: str = ""
    published: datetime | None = None
    formatted_published: str = ""
    view_count: int = -1
    formatted_view_count: str = ""
    license: License = License.YOUTUBE
    id: str = ""
    kind: str = ""
    definition_code: int = 0
    stream_listeners: list[Callable[[str, str], None]] = field(
        default_factory=list, repr=False, compare=False
    )

    def clone(self) -> Video:
        """A copy carrying the descriptive fields, without audio URL, license or kind."""
        return Video(
            title=self.title,
            description=self.description,
            channel_title=self.channel_title,
            channel_id=self.channel_id,
            webpage=self.webpage,
            stream_url=self.stream_url,
            thumbnail=self.thumbnail,
            thumbnail_url=self.thumbnail_url,
            medium_thumbnail_url=self.medium_thumbnail_url,
            duration=self.duration,
            formatted_duration=self.formatted_duration,
            published=self.published,
            formatted_published=self.formatted_published,
            view_count=self.view_count,
            formatted_view_count=self.formatted_view_count,
            id=self.id,
            definition_code=self.definition_code,
        )

    def resolve_webpage(self) -> str:
        """The watch page URL, built from the id when none was set."""
        if not self.webpage and self.id:
            self.webpage = WATCH_URL + self.id
        return self.webpage

    def assign_webpage(self, value: str, id_pattern: str | re.Pattern[str]) -> str:
        """Set the watch page and, if the id is unknown, take it from group 1 of ``id_pattern``."""
        self.webpage = value
        if not self.id:
            match = re.search(id_pattern, value)
            if match is None:
                log.warning("Cannot get video id for %s", value)
            else:
                self.id = match.group(1)
        return self.id

    def stream_url_loaded(
        self, stream_url: str, audio_url: str, definition_code: int | None = None
    ) -> None:
        """Record resolved stream URLs and tell the listeners."""
        self.stream_url = stream_url
        self.audio_stream_url = audio_url
        for listener in self.stream_listeners:
            listener(stream_url, audio_url)
        if definition_code is not None:
            self.definition_code = definition_code