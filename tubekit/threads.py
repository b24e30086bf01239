"""Replies to a top-level comment and the list model that shows them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable

USER_ROLE = 0x0100


class DataRole(IntEnum):
    """Roles under which a reply's fields are exposed."""

    ID = USER_ROLE
    TEXT = USER_ROLE + 1
    AUTHOR = USER_ROLE + 2
    AUTHOR_PROFILE_IMAGE = USER_ROLE + 3


@dataclass
class Comment:
    """One comment as shown in a thread."""

    id: str = ""
    text: str = ""
    author: str = ""
    author_profile_image: str = ""


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_comments(payload: bytes | str) -> list[Comment]:
    """Read the comments from a comments API response; malformed input gives none."""
    try:
        document = json.loads(payload)
    except (ValueError, TypeError):
        return []
    items = _as_dict(document).get("items")
    if not isinstance(items, list):
        return []
    comments = []
    for item in items:
        if not isinstance(item, dict):
            continue
        snippet = _as_dict(item.get("snippet"))
        comments.append(
            Comment(
                id=_as_str(item.get("id")),
                text=_as_str(snippet.get("textDisplay")),
                author=_as_str(snippet.get("authorDisplayName")),
                author_profile_image=_as_str(snippet.get("authorProfileImageUrl")),
            )
        )
    return comments


_ROLE_ATTRIBUTES = {
    DataRole.ID: "id",
    DataRole.TEXT: "text",
    DataRole.AUTHOR: "author",
    DataRole.AUTHOR_PROFILE_IMAGE: "author_profile_image",
}

_ROLE_NAMES = {
    DataRole.ID: "id",
    DataRole.TEXT: "commentText",
    DataRole.AUTHOR: "author",
    DataRole.AUTHOR_PROFILE_IMAGE: "authorProfileImageUrl",
}


@dataclass
class ThreadModel:
    """The replies to one top-level comment."""

    top_level_comment: Comment = field(default_factory=Comment)
    comments: list[Comment] = field(default_factory=list)
    listeners: list[Callable[[], None]] = field(default_factory=list, repr=False, compare=False)

    def row_count(self) -> int:
        return len(self.comments)

    def data(self, row: int, role: int) -> str | None:
        """The field of reply ``row`` for ``role``, or None when either is unknown."""
        if not 0 <= row < len(self.comments):
            return None
        try:
            attribute = _ROLE_ATTRIBUTES[DataRole(role)]
        except ValueError:
            return None
        return getattr(self.comments[row], attribute)

    def role_names(self) -> dict[DataRole, str]:
        return dict(_ROLE_NAMES)

    def comments_query(self) -> list[tuple[str, str]]:
        """Query items that request the replies to the top-level comment."""
        return [("parentId", self.top_level_comment.id), ("part", "snippet")]

    def parse_comments(self, payload: bytes | str) -> list[Comment]:
        """Replace the replies with those in ``payload`` and notify listeners."""
        self.comments = parse_comments(payload)
        for listener in self.listeners:
            listener()
        return self.comments