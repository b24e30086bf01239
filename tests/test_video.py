from datetime import datetime

from tubekit.video import License, Video

ID_PATTERN = r"[?&]v=([0-9A-Za-z_-]{11})"


def test_defaults():
    video = Video()
    assert video.duration == 0
    assert video.view_count == -1
    assert video.license is License.YOUTUBE
    assert video.definition_code == 0


def test_license_values():
    assert int(License.YOUTUBE) == 1
    assert License(2) is License.CC


def test_resolve_webpage_from_id():
    video = Video(id="abcdefghijk")
    assert video.resolve_webpage() == "https://www.youtube.com/watch?v=abcdefghijk"
    assert video.webpage == video.resolve_webpage()


def test_resolve_webpage_keeps_existing_and_empty_without_id():
    assert Video(id="x", webpage="page").resolve_webpage() == "page"
    assert Video().resolve_webpage() == ""


def test_assign_webpage_extracts_id():
    video = Video()
    url = "https://www.youtube.com/watch?v=abcdefghijk&t=3"
    assert video.assign_webpage(url, ID_PATTERN) == "abcdefghijk"
    assert video.webpage == url


def test_assign_webpage_keeps_known_id():
    video = Video(id="known")
    video.assign_webpage("https://www.youtube.com/watch?v=abcdefghijk", ID_PATTERN)
    assert video.id == "known"


def test_assign_webpage_without_match_leaves_id_empty():
    video = Video()
    assert video.assign_webpage("https://elsewhere.example.com/", ID_PATTERN) == ""
    assert video.webpage == "https://elsewhere.example.com/"


def test_clone_copies_descriptive_fields_only():
    original = Video(
        title="t",
        description="d",
        channel_title="ct",
        channel_id="cid",
        webpage="w",
        stream_url="s",
        audio_stream_url="a",
        thumbnail=b"img",
        thumbnail_url="tu",
        medium_thumbnail_url="mu",
        large_thumbnail_url="lu",
        duration=42,
        formatted_duration="0:42",
        published=datetime(2020, 1, 2),
        formatted_published="fp",
        view_count=7,
        formatted_view_count="7",
        license=License.CC,
        id="vid",
        kind="k",
        definition_code=18,
    )
    copy = original.clone()
    assert copy is not original
    assert copy.title == "t" and copy.channel_id == "cid" and copy.thumbnail == b"img"
    assert copy.duration == 42 and copy.view_count == 7 and copy.definition_code == 18
    assert copy.published == datetime(2020, 1, 2)
    assert copy.audio_stream_url == ""
    assert copy.large_thumbnail_url == ""
    assert copy.license is License.YOUTUBE
    assert copy.kind == ""


def test_stream_url_loaded_sets_urls_and_notifies():
    received = []
    video = Video(stream_listeners=[lambda v, a: received.append((v, a))])
    video.stream_url_loaded("video-url", "audio-url", 22)
    assert video.stream_url == "video-url"
    assert video.audio_stream_url == "audio-url"
    assert video.definition_code == 22
    assert received == [("video-url", "audio-url")]


def test_stream_url_loaded_without_code_keeps_definition():
    video = Video(definition_code=18)
    video.stream_url_loaded("v", "")
    assert video.definition_code == 18
    assert video.stream_url == "v"