import uuid

import pytest

from community.models import Comment, Post, Reaction

pytestmark = pytest.mark.django_db


def test_list_requires_post_id(client):
    response = client.get("/api/comments")
    assert response.status_code == 400
    assert response.json()["error"] == "post_id is required"


def test_list_rejects_malformed_post_id(client):
    response = client.get("/api/comments", {"post_id": "abc"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid post_id format: 'abc'. Expected UUID."


def test_list_for_unknown_post_is_empty_array(client):
    response = client.get("/api/comments", {"post_id": str(uuid.uuid4())})
    assert response.status_code == 200
    assert response.json() == []


def test_list_thread_and_chat_views(client, post, make_comment):
    root = make_comment("root")
    make_comment("reply", parent=root)

    thread = client.get("/api/comments", {"post_id": str(post.id)}).json()
    assert len(thread) == 1
    assert thread[0]["children"][0]["content"] == "reply"

    chat = client.get("/api/comments", {"post_id": str(post.id), "view": "chat"}).json()
    assert [c["content"] for c in chat] == ["root", "reply"]
    assert chat[1]["parent_id"] == str(root.id)


def test_list_hides_comments_of_moderated_post(client, other_client, user_client, mod_client, post, make_comment):
    make_comment("secret reply")
    Post.objects.filter(pk=post.pk).update(status="moderated")
    params = {"post_id": str(post.id)}

    assert client.get(f"/api/posts/{post.id}").status_code == 404
    assert client.get("/api/comments", params).json() == []
    assert other_client.get("/api/comments", {**params, "view": "chat"}).json() == []

    assert [c["content"] for c in user_client.get("/api/comments", params).json()] == ["secret reply"]
    assert [c["content"] for c in mod_client.get("/api/comments", params).json()] == ["secret reply"]


def test_list_rejects_unknown_view(client, post):
    assert client.get("/api/comments", {"post_id": str(post.id), "view": "grid"}).status_code == 400


def test_create_comment(user_client, post):
    response = user_client.post(
        "/api/comments", {"post_id": str(post.id), "content": "You're not alone"}, content_type="application/json"
    )
    assert response.status_code == 201
    body = response.json()
    assert body["depth"] == 0
    assert body["children"] == []
    assert body["is_author"] is True
    assert body["author"]["is_anonymous"] is True
    assert Comment.objects.filter(post=post).count() == 1


def test_create_comment_requires_login(client, post):
    response = client.post("/api/comments", {"post_id": str(post.id), "content": "hi"}, content_type="application/json")
    assert response.status_code == 401


def test_create_comment_validates_ids(user_client, post):
    missing = user_client.post("/api/comments", {"content": "hi"}, content_type="application/json")
    assert missing.status_code == 400
    assert missing.json()["error"] == "post_id and content are required"

    bad_parent = user_client.post(
        "/api/comments",
        {"post_id": str(post.id), "content": "hi", "parent_comment_id": "nope"},
        content_type="application/json",
    )
    assert bad_parent.status_code == 400
    assert bad_parent.json()["error"] == "Invalid parent_comment_id format: 'nope'. Expected UUID."


def test_cannot_comment_on_deleted_post(user_client, post):
    post.status = "deleted"
    post.save()
    response = user_client.post("/api/comments", {"post_id": str(post.id), "content": "hi"}, content_type="application/json")
    assert response.status_code == 404


def test_parent_must_belong_to_same_post(user_client, user, post, make_comment):
    elsewhere = Post.objects.create(author=user, title="x", content="y")
    foreign = make_comment("elsewhere", target=elsewhere)
    response = user_client.post(
        "/api/comments",
        {"post_id": str(post.id), "content": "hi", "parent_comment_id": str(foreign.id)},
        content_type="application/json",
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid parent comment"


def test_reply_depth_limit(settings, user_client, post, make_comment):
    settings.COMMENT_MAX_DEPTH = 2
    c0 = make_comment("d0")
    c1 = make_comment("d1", parent=c0)
    c2 = make_comment("d2", parent=c1)

    ok = user_client.post(
        "/api/comments",
        {"post_id": str(post.id), "content": "d2", "parent_comment_id": str(c1.id)},
        content_type="application/json",
    )
    assert ok.status_code == 201
    assert ok.json()["depth"] == 2
    assert ok.json()["can_reply"] is False

    too_deep = user_client.post(
        "/api/comments",
        {"post_id": str(post.id), "content": "d3", "parent_comment_id": str(c2.id)},
        content_type="application/json",
    )
    assert too_deep.status_code == 400
    assert too_deep.json()["error"] == "Maximum reply depth reached"


def test_owner_edits_comment(user_client, other_client, make_comment):
    comment = make_comment("first draft")
    url = f"/api/comments/{comment.id}"
    assert other_client.put(url, {"content": "hijack"}, content_type="application/json").status_code == 403
    assert user_client.put(url, {"content": " "}, content_type="application/json").status_code == 400

    response = user_client.put(url, {"content": "second draft", "is_anonymous": False}, content_type="application/json")
    assert response.status_code == 200
    comment.refresh_from_db()
    assert comment.content == "second draft"
    assert comment.is_anonymous is False


def test_owner_soft_deletes_comment(user_client, client, post, make_comment):
    parent = make_comment("parent")
    make_comment("child", parent=parent)
    assert user_client.delete(f"/api/comments/{parent.id}").status_code == 200
    parent.refresh_from_db()
    assert parent.status == "deleted"

    thread = client.get("/api/comments", {"post_id": str(post.id)}).json()
    assert thread[0]["content"] == "[deleted]"
    assert thread[0]["children"][0]["content"] == "child"


def test_upvote_toggles(other_client, other_user, make_comment):
    comment = make_comment("helpful")
    url = f"/api/comments/{comment.id}/upvote"
    first = other_client.post(url).json()
    assert first == {"upvoted": True, "upvotes": 1}
    assert Reaction.objects.filter(comment=comment, user=other_user, reaction_type="upvote").exists()

    second = other_client.post(url).json()
    assert second == {"upvoted": False, "upvotes": 0}


def test_comment_reactions_endpoint(other_client, client, make_comment):
    comment = make_comment("hugs please")
    url = f"/api/comments/{comment.id}/reactions"

    added = other_client.post(url, {"reaction_type": "hug"}, content_type="application/json")
    assert added.status_code == 201
    assert added.json()["reaction_counts"]["hugs"] == 1
    assert added.json()["user_reactions"]["hug"] is True

    again = other_client.post(url, {"reaction_type": "hug"}, content_type="application/json")
    assert again.status_code == 200
    assert again.json()["changed"] is False

    listed = client.get(url).json()["reactions"]
    assert [r["reaction_type"] for r in listed] == ["hug"]

    removed = other_client.delete(f"{url}?reaction_type=hug")
    assert removed.json()["changed"] is True
    assert removed.json()["reaction_counts"]["hugs"] == 0

    assert other_client.post(url, {"reaction_type": "wave"}, content_type="application/json").status_code == 400
