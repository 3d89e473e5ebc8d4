import pytest
from django.core.cache import cache
from django.test import Client

from community.models import Comment, Post, User, UserRole


@pytest.fixture(autouse=True)
def _test_settings(settings):
    settings.SECURE_SSL_REDIRECT = False
    settings.GEMINI_API_KEY = "test-key"
    settings.COMMENT_MAX_DEPTH = 5
    settings.STORAGES = {
        "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }
    cache.clear()
    yield
    cache.clear()


def make_user(username, role=None, **extra):
    user = User.objects.create_user(
        username=username,
        password="s3cret-pass",
        anonymous_username=f"Calm{username.title()}1",
        **extra,
    )
    if role:
        UserRole.objects.create(user=user, role=role)
    return user


def login_client(user):
    client = Client()
    client.force_login(user)
    return client


@pytest.fixture
def user(db):
    return make_user("alice")


@pytest.fixture
def other_user(db):
    return make_user("bob")


@pytest.fixture
def moderator(db):
    return make_user("mod", role="moderator")


@pytest.fixture
def admin_user(db):
    return make_user("boss", role="admin")


@pytest.fixture
def user_client(user):
    return login_client(user)


@pytest.fixture
def other_client(other_user):
    return login_client(other_user)


@pytest.fixture
def mod_client(moderator):
    return login_client(moderator)


@pytest.fixture
def admin_client_(admin_user):
    return login_client(admin_user)


@pytest.fixture
def post(user):
    return Post.objects.create(
        author=user,
        title="Feeling stuck at work",
        content="Every Monday feels heavier.",
        category="Career Stress",
        anonymous_username="QuietOwl12",
    )


@pytest.fixture
def make_comment(post, user):
    def _make(content="hi", parent=None, author=None, status="active", target=None):
        return Comment.objects.create(
            post=target or post,
            parent=parent,
            author=author or user,
            content=content,
            anonymous_username="GentleFox7",
            status=status,
        )
    return _make
