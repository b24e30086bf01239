import json

import pytest

from tubekit.threads import Comment, DataRole, ThreadModel, parse_comments


def _payload():
    return json.dumps(
        {
            "items": [
                {
                    "id": "c1",
                    "snippet": {
                        "textDisplay": "first",
                        "authorDisplayName": "Ann",
                        "authorProfileImageUrl": "http://img.example.com/a.png",
                    },
                },
                "not an object",
                {"id": "c2", "snippet": {"textDisplay": "second"}},
            ]
        }
    ).encode()


def test_parse_comments_reads_fields_and_skips_non_objects():
    comments = parse_comments(_payload())
    assert comments == [
        Comment("c1", "first", "Ann", "http://img.example.com/a.png"),
        Comment("c2", "second", "", ""),
    ]


@pytest.mark.parametrize("payload", [b"not json", b"[]", b'{"items": {}}', b"{}"])
def test_parse_comments_malformed_gives_nothing(payload):
    assert parse_comments(payload) == []


def test_non_string_fields_become_empty():
    payload = json.dumps({"items": [{"id": 5, "snippet": "x"}]})
    assert parse_comments(payload) == [Comment()]


def test_model_data_by_role():
    model = ThreadModel()
    model.parse_comments(_payload())
    assert model.row_count() == 2
    assert model.data(0, DataRole.ID) == "c1"
    assert model.data(0, DataRole.TEXT) == "first"
    assert model.data(0, DataRole.AUTHOR) == "Ann"
    assert model.data(0, DataRole.AUTHOR_PROFILE_IMAGE) == "http://img.example.com/a.png"
    assert model.data(1, int(DataRole.TEXT)) == "second"


def test_model_data_out_of_range_or_unknown_role():
    model = ThreadModel(comments=[Comment("a")])
    assert model.data(1, DataRole.ID) is None
    assert model.data(-1, DataRole.ID) is None
    assert model.data(0, 0) is None
    assert ThreadModel().data(0, DataRole.ID) is None


def test_role_names():
    assert ThreadModel().role_names() == {
        DataRole.ID: "id",
        DataRole.TEXT: "commentText",
        DataRole.AUTHOR: "author",
        DataRole.AUTHOR_PROFILE_IMAGE: "authorProfileImageUrl",
    }


def test_comments_query_uses_top_level_id():
    model = ThreadModel(top_level_comment=Comment(id="top"))
    assert model.comments_query() == [("parentId", "top"), ("part", "snippet")]


def test_parse_replaces_previous_and_notifies():
    calls = []
    model = ThreadModel(comments=[Comment("old")], listeners=[lambda: calls.append(1)])
    result = model.parse_comments(b"{}")
    assert result == []
    assert model.row_count() == 0
    assert calls == [1]