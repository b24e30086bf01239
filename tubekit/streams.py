"""Locating playable stream URLs in video info, watch pages and player scripts."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from urllib.parse import unquote

from .definitions import VideoDefinition, definitions

log = logging.getLogger(__name__)

_JS_NAME_CHARS = r"a-zA-Z0-9\$_"
_ARGS_AND_BODY = r"\s*\([" + _JS_NAME_CHARS + r",\s]*\)\s*\{[^\}]+\}"
_INVOKED_FUNCTION_RE = re.compile(
    r"[\s=;\(]([" + _JS_NAME_CHARS + r"]+)\s*\([" + _JS_NAME_CHARS + r",\s]+\)"
)
_OBJECT_REFERENCE_RE = re.compile(
    r"[\s=;\(]([" + _JS_NAME_CHARS + r"]+)\.[" + _JS_NAME_CHARS + r"]+"
)
_PLAYER_RESPONSE_RE = re.compile(r"&player_response=([^&]+)")
_STS_RE = re.compile(r'"sts"\s*:\s*(\d+)')
_DESCRIPTION_RE = re.compile(r'"description":\{"simpleText":"(.*?)"')

# Audio-only formats, most preferred first.
AUDIO_FORMATS: tuple[int, ...] = (249, 250, 251, 171, 140)


class StreamError(Exception):
    """No usable stream could be found for a video."""

    def __init__(self, video_id: str) -> None:
        super().__init__(f"Cannot get video stream for {video_id}")
        self.video_id = video_id


@dataclass(frozen=True)
class StreamSelection:
    """The chosen stream: its URL, its format and a separate audio URL if needed."""

    url: str
    definition: VideoDefinition
    audio_url: str = ""


def _to_int(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _query_items(query: str) -> dict[str, str]:
    items: dict[str, str] = {}
    for part in query.split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        items.setdefault(key, value)
    return items


def parse_player_response(video_info: str) -> dict[int, str]:
    """Map format codes to URLs from the ``player_response`` field of video info."""
    match = _PLAYER_RESPONSE_RE.search(video_info)
    if match is None:
        return {}
    try:
        document = json.loads(unquote(match.group(1)))
    except ValueError:
        return {}
    if not isinstance(document, dict):
        return {}
    streaming_data = document.get("streamingData")
    if not isinstance(streaming_data, dict):
        return {}

    url_map: dict[int, str] = {}
    for key in ("formats", "adaptiveFormats"):
        formats = streaming_data.get(key)
        if not isinstance(formats, list):
            continue
        for fmt in formats:
            if not isinstance(fmt, dict):
                continue
            itag = _to_int(fmt.get("itag"))
            url = fmt.get("url") if isinstance(fmt.get("url"), str) else ""
            if not url:
                cipher = fmt.get("cipher") or fmt.get("signatureCipher") or ""
                if not isinstance(cipher, str):
                    cipher = ""
                items = _query_items(cipher)
                url = unquote(items.get("url", "").strip())
                if "s" in items:
                    # Signatures cannot be decrypted without a script engine.
                    log.debug("Ciphered signature left undecrypted for format %d", itag)
            if url:
                url_map[itag] = url
    return url_map


def _param_value(param: str) -> str:
    _, sep, value = param.partition("=")
    return value if sep else param


def parse_fmt_url_map(
    fmt_url_map: str, definition: VideoDefinition, url_map: dict[int, str]
) -> tuple[dict[int, str], StreamSelection | None]:
    """Merge the formats of a comma separated stream map into ``url_map``.

    Returns the merged map and, when a format matches ``definition`` exactly and
    carries audio, the selection for it.
    """
    merged = dict(url_map)
    for format_url in filter(None, fmt_url_map.split(",")):
        fmt = -1
        url: str | None = None
        sig = ""
        sp: str | None = None
        for param in filter(None, format_url.split("&")):
            if sp is None and param.startswith("sp"):
                sp = _param_value(param)
            if param.startswith("itag="):
                try:
                    fmt = int(_param_value(param))
                except ValueError:
                    fmt = 0
            elif param.startswith("url="):
                url = unquote(_param_value(param))
            elif param.startswith("sig="):
                sig = unquote(_param_value(param))
            elif param.startswith("s="):
                sig = ""
                log.warning("Empty signature")
        if fmt == -1 or url is None:
            continue

        if sig:
            url += f"&signature={sig}" if not sp else f"&{sp}={sig}"
        if "ratebypass" not in url:
            url += "&ratebypass=yes"

        if fmt == definition.code and definition.has_audio:
            return merged, StreamSelection(url, definition, "")
        merged[fmt] = url
    return merged, None


def find_audio_url(url_map: dict[int, str], definition: VideoDefinition) -> str:
    """The preferred audio-only URL when ``definition`` lacks audio, else empty."""
    if definition.has_audio:
        return ""
    return next((url_map[code] for code in AUDIO_FORMATS if code in url_map), "")


def _selection(url_map: dict[int, str], definition: VideoDefinition) -> StreamSelection:
    return StreamSelection(
        url_map[definition.code], definition, find_audio_url(url_map, definition)
    )


def select_stream(
    url_map: dict[int, str], definition: VideoDefinition, video_id: str
) -> StreamSelection:
    """Pick the requested format or the best lower one; raise StreamError if none."""
    if definition.code in url_map and definition.code != 0:
        return _selection(url_map, definition)
    known = definitions()
    start = known.index(definition) if definition in known else 0
    for candidate in reversed(known[: start + 1]):
        if candidate.code in url_map:
            return _selection(url_map, candidate)
    raise StreamError(video_id)


def capture_object(name: str, js: str) -> str | None:
    """The ``var name = {...};`` declaration in ``js``, or None when absent."""
    pattern = re.compile(r"var\s+" + re.escape(name) + r"\s*?=\s*?\{.*?\}\s*?;", re.DOTALL)
    match = pattern.search(js)
    if match is None:
        log.warning("Cannot capture object %s", name)
        return None
    return match.group(0)


def _find_function(name: str, js: str) -> str | None:
    escaped = re.escape(name)
    match = re.search(r"function\s+" + escaped + _ARGS_AND_BODY, js)
    if match:
        return match.group(0)
    match = re.search(r"var\s+" + escaped + r"\s*=\s*function" + _ARGS_AND_BODY, js)
    if match:
        return match.group(0)
    match = re.search(
        r"[,\s;}\.\)](" + escaped + r"\s*=\s*function" + _ARGS_AND_BODY + ")", js
    )
    if match:
        return match.group(1)
    return None


def _collect(name: str, js: str, functions: dict[str, str], objects: dict[str, str]) -> None:
    func = _find_function(name, js)
    if func is None:
        log.warning("Cannot capture function %s", name)
        return
    functions[name] = func

    start = len(name) + 9
    for match in _INVOKED_FUNCTION_RE.finditer(func, start):
        inner = match.group(1)
        if inner not in functions:
            _collect(inner, js, functions, objects)

    for match in _OBJECT_REFERENCE_RE.finditer(func, start):
        obj_name = match.group(1)
        if obj_name not in objects:
            obj = capture_object(obj_name, js)
            if obj is not None:
                objects[obj_name] = obj


def capture_function(
    name: str,
    js: str,
    functions: dict[str, str] | None = None,
    objects: dict[str, str] | None = None,
) -> tuple[dict[str, str], dict[str, str]]:
    """Extract function ``name`` from ``js`` with the functions and objects it uses.

    ``functions`` and ``objects`` hold what is already known; the returned
    dictionaries extend copies of them.
    """
    found_functions = dict(functions or {})
    found_objects = dict(objects or {})
    _collect(name, js, found_functions, found_objects)
    return found_functions, found_objects


def extract_sts(body: str) -> str:
    """The ``sts`` value embedded in an embed page, or an empty string."""
    match = _STS_RE.search(body)
    return match.group(1) if match else ""


def extract_description(html: str) -> str | None:
    """The plain description text from a watch page, if present."""
    match = _DESCRIPTION_RE.search(html)
    return match.group(1) if match else None


def normalize_player_url(url: str) -> str:
    """Turn a scraped player script path into an absolute URL."""
    url = url.replace("\\", "")
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return "https://youtube.com" + url
    return url


def watch_page_query(video_id: str) -> list[tuple[str, str]]:
    """Query items for loading the watch page of ``video_id``."""
    return [
        ("v", video_id),
        ("gl", "US"),
        ("hl", "en"),
        ("has_verified", "1"),
        ("bpctr", "9999999999"),
    ]