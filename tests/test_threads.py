from datetime import timedelta

import pytest
from django.utils import timezone

from community.models import Comment
from community.threads import build_comment_tree, flatten_comment_tree

pytestmark = pytest.mark.django_db


@pytest.fixture
def thread(make_comment):
    """
    root (t0)
    ├── a (t1)
    │   └── a1 (t3)
    │       └── a1x (t4)
    └── b (t2)
    second (t5)
    """
    base = timezone.now() - timedelta(hours=1)
    nodes = {}
    layout = [
        ("root", None), ("a", "root"), ("b", "root"), ("a1", "a"), ("a1x", "a1"), ("second", None),
    ]
    for i, (name, parent) in enumerate(layout):
        c = make_comment(name, parent=nodes.get(parent))
        Comment.objects.filter(pk=c.pk).update(created_at=base + timedelta(minutes=i))
        nodes[name] = c
    return nodes


def ordered(post):
    return list(Comment.objects.filter(post=post).order_by("created_at"))


def test_nesting_depth_and_reply_counts(post, thread):
    tree = build_comment_tree(ordered(post), max_depth=5)
    assert [n["content"] for n in tree] == ["root", "second"]

    root = tree[0]
    assert root["depth"] == 0
    assert root["reply_count"] == 4
    assert [c["content"] for c in root["children"]] == ["a", "b"]

    a1x = root["children"][0]["children"][0]["children"][0]
    assert a1x["content"] == "a1x"
    assert a1x["depth"] == 3
    assert a1x["reply_count"] == 0


def test_collapse_and_can_reply_follow_depth(post, thread):
    tree = build_comment_tree(ordered(post), max_depth=2)
    root = tree[0]
    a = root["children"][0]
    a1 = a["children"][0]
    assert root["collapsed"] is False
    assert a["collapsed"] is False
    assert a1["collapsed"] is True
    assert a["can_reply"] is True
    assert a1["can_reply"] is False


def test_deleted_comment_with_replies_becomes_tombstone(post, thread):
    Comment.objects.filter(pk=thread["a"].pk).update(status="deleted")
    tree = build_comment_tree(ordered(post))
    a = tree[0]["children"][0]
    assert a["content"] == "[deleted]"
    assert a["author"]["username"] == "Anonymous"
    assert a["can_reply"] is False
    assert a["children"][0]["content"] == "a1"


def test_deleted_leaves_are_dropped(post, thread):
    Comment.objects.filter(pk__in=[thread["b"].pk, thread["second"].pk]).update(status="deleted")
    tree = build_comment_tree(ordered(post))
    assert [n["content"] for n in tree] == ["root"]
    assert [c["content"] for c in tree[0]["children"]] == ["a"]
    assert tree[0]["reply_count"] == 3


def test_deleted_chain_without_survivors_is_dropped(post, thread):
    Comment.objects.filter(pk__in=[thread["a"].pk, thread["a1"].pk, thread["a1x"].pk]).update(status="deleted")
    tree = build_comment_tree(ordered(post))
    assert [c["content"] for c in tree[0]["children"]] == ["b"]


def test_moderated_content_is_masked(post, thread):
    Comment.objects.filter(pk=thread["b"].pk).update(status="moderated")
    tree = build_comment_tree(ordered(post))
    assert tree[0]["children"][1]["content"] == "[removed by moderator]"


def test_orphan_is_promoted_to_root(post, thread):
    rows = [c for c in ordered(post) if c.content != "a"]
    tree = build_comment_tree(rows)
    assert [n["content"] for n in tree] == ["root", "a1", "second"]
    assert tree[1]["depth"] == 0
    assert tree[1]["children"][0]["depth"] == 1


def test_viewer_flags(post, thread, user, other_user):
    tree = build_comment_tree(ordered(post), viewer=user)
    assert tree[0]["is_author"] is True
    tree = build_comment_tree(ordered(post), viewer=other_user)
    assert tree[0]["is_author"] is False


def test_flat_chat_view_is_chronological_with_reply_to(post, thread):
    flat = flatten_comment_tree(build_comment_tree(ordered(post)))
    assert [i["content"] for i in flat] == ["root", "a", "b", "a1", "a1x", "second"]
    by_content = {i["content"]: i for i in flat}
    assert by_content["root"]["parent_id"] is None
    assert by_content["root"]["reply_to"] is None
    assert by_content["a1"]["parent_id"] == str(thread["a"].id)
    assert by_content["a1"]["reply_to"] == "GentleFox7"
    assert "children" not in by_content["a"]
