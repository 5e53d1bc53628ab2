"""HTTP surface tests: routes, status codes and the save/delete scenario."""

import pytest
from fastapi.testclient import TestClient

from nectree.main import create_app

BLOG = {"name": "blog", "url": "http://x", "image": "i.png", "description": "my blog", "order": 1}


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def test_empty_page(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "No links yet" in response.text


def test_favicon(client: TestClient) -> None:
    response = client.get("/favicon.ico")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/x-icon"
    assert response.content[:4] == b"\x00\x00\x01\x00"


def test_save_then_delete_scenario(client: TestClient) -> None:
    created = client.post("/post", json={"Save": BLOG})
    assert created.status_code == 201
    assert created.content == b""

    page = client.get("/").text
    assert 'href="http://x"' in page
    assert "my blog" in page

    deleted = client.post("/post", json={"Delete": {"name": "blog"}})
    assert deleted.status_code == 201
    assert "No links yet" in client.get("/").text


def test_delete_unknown_is_success(client: TestClient) -> None:
    assert client.post("/post", json={"Delete": {"name": "ghost"}}).status_code == 201


def test_bad_body_is_rejected(client: TestClient) -> None:
    assert client.post("/post", content=b"").status_code == 400
    assert client.post("/post", json={"Rename": {"name": "x"}}).status_code == 400
    assert "No links yet" in client.get("/").text


@pytest.mark.parametrize("method", ["put", "patch", "delete"])
def test_other_methods_on_post_path(client: TestClient, method: str) -> None:
    response = client.request(method.upper(), "/post", json={"Save": BLOG})
    assert response.status_code == 405
    assert "No links yet" in client.get("/").text


def test_post_on_root_disabled_by_default(client: TestClient) -> None:
    assert client.post("/", json={"Save": BLOG}).status_code == 405


def test_post_on_root_when_enabled(settings) -> None:
    settings.post_on_root = True
    with TestClient(create_app(settings)) as client:
        assert client.post("/", json={"Save": BLOG}).status_code == 201
        assert "my blog" in client.get("/").text


def test_state_survives_restart(settings) -> None:
    with TestClient(create_app(settings)) as client:
        client.post("/post", json={"Save": BLOG})

    assert settings.state_file.exists()
    assert settings.html_file.exists()

    with TestClient(create_app(settings)) as client:
        page = client.get("/").text
        assert 'href="http://x"' in page
        client.post("/post", json={"Save": dict(BLOG, url="http://y")})
        page = client.get("/").text
        assert 'href="http://y"' in page
        assert 'href="http://x"' not in page


def test_restart_rerenders_stale_page(settings) -> None:
    with TestClient(create_app(settings)) as client:
        client.post("/post", json={"Save": BLOG})

    # simulate a page write that never completed before the restart
    settings.html_file.write_bytes(b"")

    with TestClient(create_app(settings)) as client:
        page = client.get("/").text
        assert 'href="http://x"' in page
        assert "my blog" in page


def test_cross_origin_preflight_not_allowed(client: TestClient) -> None:
    response = client.options(
        "/post",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "POST"},
    )
    assert "access-control-allow-origin" not in response.headers
    assert "access-control-allow-credentials" not in response.headers
    assert response.status_code == 405
