# tubekit

Building blocks for a small video client: the known stream formats and how
to pick one, a video's metadata, the replies in a comment thread, and a
local SQLite store of channel subscriptions. It uses only the standard
library.

## Installing

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Modules

### `tubekit.definitions`

`VideoDefinition` is a frozen dataclass with `name`, `code` and `has_audio`.
The known formats, least preferred first, are returned by `definitions()`:
`audio` (140), `360p` (18, with audio) and `720p` (22, with audio).
`definition_names()` gives the names offered to a user
(`480p` to `2160p`). `for_name(name)` and `for_code(code)` scan the known
formats from the end and return the first match, or an empty definition
whose `is_empty()` is true.

### `tubekit.video`

`Video` is a dataclass holding a video's title, description, channel,
thumbnail URLs, duration, view count, publication date, `License`, id and
resolved stream URLs. The formatted fields (`formatted_duration`,
`formatted_view_count`, `formatted_published`) are plain strings that the
caller sets.

- `clone()` copies the descriptive fields; the audio stream URL, large
  thumbnail URL, license and kind are left at their defaults.
- `resolve_webpage()` returns the watch page, building
  `https://www.youtube.com/watch?v=<id>` when none is set.
- `assign_webpage(value, id_pattern)` sets the watch page and, if the id is
  still empty, takes it from group 1 of `id_pattern`.
- `stream_url_loaded(stream_url, audio_url, definition_code=None)` records
  the URLs, calls each function in `stream_listeners` with them, and stores
  the definition code when one is given.

### `tubekit.threads`

`parse_comments(payload)` reads a comments API response (bytes or str) into
a list of `Comment` objects; malformed JSON gives an empty list.
`ThreadModel` holds a `top_level_comment` and its replies:

- `row_count()` and `data(row, role)` expose the replies by `DataRole`
  (`ID`, `TEXT`, `AUTHOR`, `AUTHOR_PROFILE_IMAGE`); an unknown row or role
  gives `None`.
- `role_names()` maps the roles to `id`, `commentText`, `author` and
  `authorProfileImageUrl`.
- `comments_query()` returns the query items `parentId` and `part=snippet`
  for requesting the replies.
- `parse_comments(payload)` replaces the replies and calls each function in
  `listeners`.

### `tubekit.streams`

- `parse_player_response(video_info)` maps format codes to URLs from the
  `player_response` field of a video-info string, reading both `formats`
  and `adaptiveFormats`, including URLs inside `cipher` or
  `signatureCipher`.
- `parse_fmt_url_map(fmt_url_map, definition, url_map)` merges a comma
  separated stream map into a copy of `url_map`, appending signatures and
  `ratebypass=yes`. It returns the merged map together with a
  `StreamSelection` when a format matches `definition` exactly and carries
  audio, otherwise `None`.
- `select_stream(url_map, definition, video_id)` returns a
  `StreamSelection` (`url`, `definition`, `audio_url`) for the requested
  format or the best lower known one, and raises `StreamError` when none is
  available.
- `find_audio_url(url_map, definition)` returns the preferred audio-only URL
  (formats 249, 250, 251, 171, 140 in that order) when the definition has no
  audio of its own.
- `capture_function(name, js, functions=None, objects=None)` extracts a
  named function from a player script, with the functions it calls and the
  objects it references; `capture_object(name, js)` extracts a single
  `var name = {...};` declaration.
- `extract_sts(body)`, `extract_description(html)`,
  `normalize_player_url(url)` and `watch_page_query(video_id)` are small
  helpers for embed pages, watch pages and player script URLs.

### `tubekit.channels`

- `SubscriptionStore(database=":memory:", clock=time.time)` creates the
  `subscriptions` and `subscriptions_videos` tables if needed and offers
  `subscribe`, `unsubscribe`, `is_subscribed`, `load` (cached per channel
  id), `store_info`, `latest_video_id`, `update_checked`, `update_watched`,
  `store_notify_count` and `count_unwatched`.
- `Channel` holds one channel's metadata and subscription state;
  `needs_refresh(now)` is true when its data is more than ten days old,
  `apply_info(info)` takes over a `ChannelInfo` and saves it to the store,
  `update_notify_count()` recounts unwatched videos, and
  `formatted_subscriber_count()` formats the subscriber count.
- `parse_channel_response(payload)` reads a channels API response into a
  `ChannelInfo`, or `None` when there are no items.
- `format_subscriber_count(count)` gives text such as `12K subscribers`,
  and an empty string below one.
- `channel_webpage(channel_id)` builds the channel page URL.

## A short example

    from tubekit.definitions import for_name
    from tubekit.streams import select_stream

    url_map = {18: "https://media.example.com/18", 140: "https://media.example.com/140"}
    selection = select_stream(url_map, for_name("720p"), "abc123")
    print(selection.definition.name, selection.url)
    # 360p https://media.example.com/18

## What it does not do

tubekit makes no network requests: fetching API responses, watch pages,
player scripts and thumbnails is left to the caller, who passes the text in.
It does not run scripts, so ciphered stream signatures are not decrypted
and such formats come out without a signature. It has no command-line
tool, no user interface and no audio or volume control.