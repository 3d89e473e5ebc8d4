from datetime import timedelta

import pytest
from django.utils import timezone

from community.models import Post, Reaction

pytestmark = pytest.mark.django_db


def test_create_post_requires_login(client):
    response = client.post("/api/posts", {"title": "t", "content": "c"}, content_type="application/json")
    assert response.status_code == 401


def test_create_post_requires_title_and_content(user_client):
    response = user_client.post("/api/posts", {"title": "only title"}, content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == "Title and content are required"


def test_anonymous_post_gets_generated_handle_and_hides_author(user_client, user):
    response = user_client.post(
        "/api/posts",
        {"title": "Hard week", "content": "Just venting", "category": "General Support"},
        content_type="application/json",
    )
    assert response.status_code == 201
    body = response.json()
    assert body["is_anonymous"] is True
    assert body["author"]["username"]
    assert body["author"]["username"] != user.username
    assert "account" not in body["author"]
    assert body["is_author"] is True
    assert body["reaction_counts"] == {"upvotes": 0, "hearts": 0, "hugs": 0}

    stored = Post.objects.get(id=body["id"])
    assert stored.anonymous_username == body["author"]["username"]


def test_named_post_shows_username_and_stores_no_handle(user_client, user):
    response = user_client.post(
        "/api/posts",
        {"title": "Hi", "content": "Hello all", "is_anonymous": False, "anonymous_username": "Ignored1"},
        content_type="application/json",
    )
    body = response.json()
    assert body["author"]["username"] == user.username
    assert Post.objects.get(id=body["id"]).anonymous_username == ""


def test_list_posts_filters_and_counts(client, user, other_user, post, make_comment):
    Post.objects.create(author=user, title="Other", content="x", category="Relationship Advice")
    Post.objects.create(author=user, title="Gone", content="x", category="Career Stress", status="deleted")
    make_comment("one")
    make_comment("two", status="moderated")
    make_comment("three", status="deleted")
    Reaction.objects.create(user=other_user, post=post, reaction_type="heart")
    Reaction.objects.create(user=user, post=post, reaction_type="heart")

    everything = client.get("/api/posts").json()["posts"]
    assert {p["title"] for p in everything} == {"Feeling stuck at work", "Other"}

    career = client.get("/api/posts", {"category": "Career Stress"}).json()["posts"]
    assert [p["title"] for p in career] == ["Feeling stuck at work"]
    assert career[0]["comment_count"] == 2
    assert career[0]["reaction_counts"]["hearts"] == 2
    assert career[0]["user_reactions"]["heart"] is False


def test_list_posts_marks_viewer_reactions(other_client, other_user, post):
    Reaction.objects.create(user=other_user, post=post, reaction_type="hug")
    body = other_client.get("/api/posts").json()["posts"][0]
    assert body["user_reactions"] == {"upvote": False, "heart": False, "hug": True}
    assert body["is_author"] is False


def test_list_posts_pagination(client, user):
    base = timezone.now()
    for i in range(5):
        p = Post.objects.create(author=user, title=f"p{i}", content="x")
        Post.objects.filter(pk=p.pk).update(created_at=base + timedelta(minutes=i))
    page = client.get("/api/posts", {"limit": 2, "offset": 1}).json()
    assert page["limit"] == 2
    assert "Career Stress" in page["categories"]
    assert [p["title"] for p in page["posts"]] == ["p3", "p2"]


def test_list_posts_rejects_bad_limit(client):
    assert client.get("/api/posts", {"limit": "lots"}).status_code == 400


def test_post_detail_includes_comment_tree(client, post, make_comment):
    root = make_comment("root")
    make_comment("reply", parent=root)
    body = client.get(f"/api/posts/{post.id}").json()
    assert body["title"] == post.title
    assert len(body["comments"]) == 1
    assert body["comments"][0]["children"][0]["content"] == "reply"


def test_deleted_post_detail_is_404(client, post):
    post.status = "deleted"
    post.save()
    response = client.get(f"/api/posts/{post.id}")
    assert response.status_code == 404
    assert "error" in response.json()


def test_moderated_post_hidden_from_strangers(client, user_client, mod_client, post):
    post.status = "moderated"
    post.save()
    assert client.get(f"/api/posts/{post.id}").status_code == 404
    assert user_client.get(f"/api/posts/{post.id}").status_code == 200
    assert mod_client.get(f"/api/posts/{post.id}").status_code == 200


def test_only_owner_can_edit(other_client, user_client, post):
    denied = other_client.put(f"/api/posts/{post.id}", {"title": "mine now"}, content_type="application/json")
    assert denied.status_code == 403

    before = Post.objects.get(id=post.id).updated_at
    response = user_client.put(
        f"/api/posts/{post.id}",
        {"title": "Still stuck", "category": "General Support", "is_anonymous": False},
        content_type="application/json",
    )
    assert response.status_code == 200
    post.refresh_from_db()
    assert post.title == "Still stuck"
    assert post.category == "General Support"
    assert post.is_anonymous is False
    assert post.updated_at >= before


def test_edit_rejects_empty_content(user_client, post):
    response = user_client.put(f"/api/posts/{post.id}", {"content": "   "}, content_type="application/json")
    assert response.status_code == 400


def test_delete_is_soft_and_owner_only(other_client, user_client, post):
    assert other_client.delete(f"/api/posts/{post.id}").status_code == 403
    assert user_client.delete(f"/api/posts/{post.id}").status_code == 200
    post.refresh_from_db()
    assert post.status == "deleted"
    assert user_client.delete(f"/api/posts/{post.id}").status_code == 404


def test_non_uuid_post_path_is_404(client):
    assert client.get("/api/posts/123").status_code == 404
