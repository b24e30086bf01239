"""Channels, their metadata and the local store of subscriptions."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

log = logging.getLogger(__name__)

CHANNEL_URL = "https://www.youtube.com/channel/"
REFRESH_INTERVAL = 60 * 60 * 24 * 10

_INT32_MAX = 2**31 - 1
_INT32_MIN = -(2**31)

_SCHEMA = (
    "create table if not exists subscriptions ("
    "id integer primary key autoincrement, user_id varchar, user_name varchar, "
    "name varchar, description varchar, thumb_url varchar, country varchar, "
    "added timestamp, checked timestamp, updated timestamp, watched timestamp, "
    "loaded timestamp, notify_count integer, views integer)",
    "create table if not exists subscriptions_videos ("
    "id integer primary key autoincrement, video_id varchar, channel_id integer, "
    "user_id varchar, published timestamp, added timestamp, watched timestamp, "
    "title varchar, author varchar, user_id2 varchar, description varchar, "
    "url varchar, thumb_url varchar, views integer, duration integer)",
)


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _to_int(value: Any) -> int:
    """Integer value of ``value`` as a 32-bit conversion would give it, 0 when invalid."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            return 0
    return number if _INT32_MIN <= number <= _INT32_MAX else 0


def _parse_iso(value: str) -> datetime | None:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_subscriber_count(count: int | str) -> str:
    """A short subscriber count such as ``12K subscribers``; empty below one."""
    c = _to_int(count)
    if c < 1:
        return ""
    if c < 1000:
        s = str(c)
    elif c < 1000 * 1000:
        s = f"{c // 1000}K"
    elif c < 1000 * 1000 * 1000:
        s = f"{c // (1000 * 1000)}M"
    else:
        s = f"{c // (1000 * 1000 * 1000)}B"
    return f"{s} subscribers"


def channel_webpage(channel_id: str) -> str:
    """The channel page URL, or an empty string without an id."""
    return CHANNEL_URL + channel_id if channel_id else ""


@dataclass
class ChannelInfo:
    """Channel metadata as delivered by the channels API."""

    display_name: str = ""
    description: str = ""
    thumbnail_url: str = ""
    user_name: str = ""
    view_count: str = ""
    subscriber_count: str = ""
    banner_mobile_image_url: str = ""
    published_at: datetime | None = None


def parse_channel_response(payload: bytes | str) -> ChannelInfo | None:
    """Channel info from a channels API response; the last item wins, None without items."""
    try:
        document = json.loads(payload)
    except (ValueError, TypeError):
        return None
    items = _as_dict(document).get("items")
    if not isinstance(items, list):
        return None
    info: ChannelInfo | None = None
    for raw in items:
        item = _as_dict(raw)
        snippet = _as_dict(item.get("snippet"))
        statistics = _as_dict(item.get("statistics"))
        image = _as_dict(_as_dict(item.get("brandingSettings")).get("image"))
        thumbnails = _as_dict(snippet.get("thumbnails"))
        info = ChannelInfo(
            display_name=_as_str(snippet.get("title")),
            description=_as_str(snippet.get("description")),
            thumbnail_url=_as_str(_as_dict(thumbnails.get("medium")).get("url")),
            view_count=_as_str(statistics.get("viewCount")),
            subscriber_count=_as_str(statistics.get("subscriberCount")),
            banner_mobile_image_url=_as_str(image.get("bannerMobileImageUrl")),
            published_at=_parse_iso(_as_str(snippet.get("publishedAt"))),
        )
    return info


class SubscriptionStore:
    """Subscriptions and their videos kept in an SQLite database."""

    def __init__(
        self,
        database: sqlite3.Connection | str = ":memory:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.connection = (
            database if isinstance(database, sqlite3.Connection) else sqlite3.connect(database)
        )
        self.clock = clock
        self.channels: dict[str, Channel] = {}
        with self.connection:
            for statement in _SCHEMA:
                self.connection.execute(statement)

    def _now(self) -> int:
        return int(self.clock())

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self.connection:
            return self.connection.execute(sql, params)

    def subscribe(self, channel_id: str) -> Channel | None:
        """Add a subscription and return the channel loaded from the store."""
        if not channel_id:
            return None
        now = self._now()
        self._execute(
            "insert into subscriptions "
            "(user_id,added,watched,checked,views,notify_count) values (?,?,?,0,0,0)",
            (channel_id, now, now),
        )
        return self.load(channel_id)

    def unsubscribe(self, channel_id: str) -> None:
        """Remove a subscription, its videos and its cached channel."""
        if not channel_id:
            return
        self._execute("delete from subscriptions where user_id=?", (channel_id,))
        self._execute("delete from subscriptions_videos where user_id=?", (channel_id,))
        self.channels.pop(channel_id, None)

    def is_subscribed(self, channel_id: str) -> bool:
        if not channel_id:
            return False
        row = self._execute(
            "select count(*) from subscriptions where user_id=?", (channel_id,)
        ).fetchone()
        return bool(row) and (row[0] or 0) > 0

    def load(self, channel_id: str) -> Channel | None:
        """The subscribed channel ``channel_id``, cached; None when not subscribed."""
        if not channel_id:
            return None
        cached = self.channels.get(channel_id)
        if cached is not None:
            return cached
        row = self._execute(
            "select id,name,description,thumb_url,notify_count,watched,checked,loaded "
            "from subscriptions where user_id=?",
            (channel_id,),
        ).fetchone()
        if row is None:
            return None
        row_id, name, description, thumb_url, notify_count, watched, checked, loaded = row
        channel = Channel(
            channel_id=channel_id,
            id=row_id or 0,
            display_name=name or "",
            description=description or "",
            thumbnail_url=thumb_url or "",
            notify_count=notify_count or 0,
            watched=watched or 0,
            checked=checked or 0,
            loaded=loaded or 0,
            store=self,
        )
        self.channels[channel_id] = channel
        return channel

    def store_info(self, channel_id: str, info: ChannelInfo) -> None:
        """Save loaded metadata and stamp the load time."""
        if not channel_id:
            return
        self._execute(
            "update subscriptions set user_name=?, name=?, description=?, thumb_url=?, loaded=? "
            "where user_id=?",
            (
                info.user_name,
                info.display_name,
                info.description,
                info.thumbnail_url,
                self._now(),
                channel_id,
            ),
        )

    def latest_video_id(self, channel_id: str) -> str:
        row = self._execute(
            "select video_id from subscriptions_videos where user_id=? "
            "order by published desc limit 1",
            (channel_id,),
        ).fetchone()
        return "" if row is None or row[0] is None else str(row[0])

    def update_checked(self, channel_id: str) -> int | None:
        """Stamp the time the channel was checked for new videos."""
        if not channel_id:
            return None
        now = self._now()
        self._execute(
            "update subscriptions set checked=? where user_id=?", (now, channel_id)
        )
        return now

    def update_watched(self, channel_id: str) -> int | None:
        """Stamp a visit: reset the notify count and count one more view."""
        if not channel_id:
            return None
        now = self._now()
        self._execute(
            "update subscriptions set watched=?, notify_count=0, views=views+1 where user_id=?",
            (now, channel_id),
        )
        return now

    def store_notify_count(self, channel_id: str, count: int) -> None:
        self._execute(
            "update subscriptions set notify_count=? where user_id=?", (count, channel_id)
        )

    def count_unwatched(self, row_id: int, watched: int) -> int:
        """Unwatched videos of channel ``row_id`` added and published after ``watched``."""
        row = self._execute(
            "select count(*) from subscriptions_videos "
            "where channel_id=? and added>? and published>? and watched=0",
            (row_id, watched, watched),
        ).fetchone()
        return row[0] if row else 0


@dataclass
class Channel:
    """A channel with its metadata and subscription state."""

    channel_id: str
    id: int = 0
    user_name: str = ""
    display_name: str = ""
    description: str = ""
    country_code: str = ""
    view_count: str = ""
    subscriber_count: str = ""
    banner_mobile_image_url: str = ""
    published_at: datetime | None = None
    thumbnail_url: str = ""
    notify_count: int = 0
    checked: int = 0
    watched: int = 0
    loaded: int = 0
    loading: bool = False
    store: SubscriptionStore | None = field(default=None, repr=False, compare=False)

    def needs_refresh(self, now: float) -> bool:
        """True when the metadata is older than the refresh interval and no load is running."""
        if self.loading or not self.channel_id:
            return False
        return not self.loaded > int(now) - REFRESH_INTERVAL

    def apply_info(self, info: ChannelInfo) -> None:
        """Take over loaded metadata and save it when the channel is stored."""
        self.display_name = info.display_name
        self.description = info.description
        self.thumbnail_url = info.thumbnail_url
        self.view_count = info.view_count
        self.subscriber_count = info.subscriber_count
        self.banner_mobile_image_url = info.banner_mobile_image_url
        self.published_at = info.published_at
        if self.store is not None:
            self.store.store_info(self.channel_id, info)
        self.loading = False

    def update_notify_count(self) -> bool:
        """Recount unwatched videos and store the count; returns whether it still differs."""
        if self.store is None:
            raise RuntimeError(f"channel {self.channel_id} has no store")
        count = self.store.count_unwatched(self.id, self.watched)
        self.notify_count = count
        self.store.store_notify_count(self.channel_id, count)
        return count != self.notify_count

    def formatted_subscriber_count(self) -> str:
        return format_subscriber_count(self.subscriber_count)