import pytest
from fastapi.testclient import TestClient

from klenhub_backend.app.admin.pages import (
    COMING_SOON,
    last_segment,
    render_placeholder,
    resolve_title,
)
from klenhub_backend.main import app


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.mark.parametrize(
    "page, path, title",
    [
        ("content", "/admin/content/pages", "Pages"),
        ("content", "/admin/content/blog", "Blog Posts"),
        ("content", "/admin/content/media", "Media Library"),
        ("content", "/admin/content", "Content Management"),
        ("marketing", "/admin/marketing/discounts", "Discounts"),
        ("marketing", "/admin/marketing/promotions", "Promotions"),
        ("marketing", "/admin/marketing/email", "Email Marketing"),
        ("marketing", "/admin/marketing", "Marketing"),
        ("settings", "/admin/settings/general", "General Settings"),
        ("settings", "/admin/settings/users", "User Management"),
        ("settings", "/admin/settings", "Settings"),
    ],
)
def test_resolve_title(page, path, title):
    assert resolve_title(page, path) == title


def test_segment_must_match_exactly():
    assert resolve_title("content", "/admin/content/Blog") == "Content Management"
    assert resolve_title("marketing", "/admin/marketing/emails") == "Marketing"
    # another page's segment is not shared
    assert resolve_title("settings", "/admin/settings/media") == "Settings"


def test_only_the_last_segment_counts():
    assert resolve_title("content", "/admin/content/blog/drafts") == "Content Management"
    assert resolve_title("content", "/admin/content/drafts/blog") == "Blog Posts"


def test_trailing_slash_falls_back_to_default():
    assert last_segment("/admin/content/blog/") == ""
    assert resolve_title("content", "/admin/content/blog/") == "Content Management"


def test_unknown_page():
    with pytest.raises(KeyError):
        resolve_title("analytics", "/admin/analytics")


def test_render_placeholder_escapes_title():
    rendered = render_placeholder("<Blog & News>")
    assert "<h1>&lt;Blog &amp; News&gt;</h1>" in rendered
    assert COMING_SOON in rendered


def test_admin_route_renders_title(client):
    response = client.get("/admin/marketing/email")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<h1>Email Marketing</h1>" in response.text
    assert COMING_SOON in response.text


def test_admin_route_default_title(client):
    response = client.get("/admin/settings")

    assert response.status_code == 200
    assert "<h1>Settings</h1>" in response.text


def test_admin_route_nested_path(client):
    response = client.get("/admin/content/archive/media")

    assert response.status_code == 200
    assert "<h1>Media Library</h1>" in response.text


def test_admin_route_unknown_page(client):
    assert client.get("/admin/analytics").status_code == 404
    assert client.get("/admin/analytics/reports").status_code == 404


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
