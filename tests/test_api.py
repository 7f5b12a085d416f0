import re
import sys

import pytest
from fastapi.testclient import TestClient
from starlette.requests import ClientDisconnect, Request

from shorturl import main as main_module
from shorturl.main import create_app
from shorturl.shortener import Shortener


def test_shorten_and_redirect_ok():
    client = TestClient(create_app())

    r = client.post("/getShortUrl", json={"url": "https://example.com"})
    assert r.status_code == 202
    data = r.json()
    assert data["Code"] == 202
    assert data["Message"] == "short url generated for the provided URL"
    assert data["Response"]["ActualURL"] == "https://example.com"
    assert re.fullmatch(r"testserver/[0-9a-f]{8}", data["Response"]["ShortURL"])

    code = data["Response"]["ShortURL"].rsplit("/", 1)[1]
    r2 = client.get(f"/{code}", follow_redirects=False)
    assert r2.status_code == 303
    assert r2.headers["location"] == "https://example.com"


def test_apps_do_not_share_links():
    first = TestClient(create_app())
    second = TestClient(create_app())

    r = first.post("/getShortUrl", json={"url": "https://example.com"})
    code = r.json()["Response"]["ShortURL"].rsplit("/", 1)[1]

    assert second.get(f"/{code}", follow_redirects=False).status_code == 404


def test_redirect_404():
    client = TestClient(create_app())

    r = client.get("/unknownCode123", follow_redirects=False)
    assert r.status_code == 404
    assert r.json()["detail"] == "Not found"


def test_malformed_json_404():
    client = TestClient(create_app())

    for body in [b"{not json", b"[1, 2]", b'{"url": 42}']:
        r = client.post("/getShortUrl", content=body, headers={"content-type": "application/json"})
        assert r.status_code == 404
        assert r.json()["detail"] == "Posted URL not supported"


def test_invalid_url_404():
    client = TestClient(create_app())

    for payload in [{"url": "not a url"}, {"url": "/relative/path"}, {}]:
        r = client.post("/getShortUrl", json=payload)
        assert r.status_code == 404
        assert r.json()["detail"] == "An invalid URL found, provide a valid URL"


def test_unreadable_body_302(monkeypatch):
    async def disconnected(self):
        raise ClientDisconnect()

    monkeypatch.setattr(Request, "body", disconnected)
    client = TestClient(create_app())

    r = client.post("/getShortUrl", json={"url": "https://example.com"}, follow_redirects=False)
    assert r.status_code == 302
    assert r.json()["detail"] == "Posted data not supported"


def test_unexpected_error_is_500(monkeypatch):
    def broken(self, code):
        raise RuntimeError("boom")

    monkeypatch.setattr(Shortener, "resolve", broken)
    client = TestClient(create_app(), raise_server_exceptions=False)

    r = client.get("/abcdefgh", follow_redirects=False)
    assert r.status_code == 500
    assert r.json()["detail"] == "Internal server error"

    # the app keeps serving after the failure
    r2 = client.post("/getShortUrl", json={"url": "https://example.com"})
    assert r2.status_code == 202


def test_url_with_surrounding_space_is_rejected():
    client = TestClient(create_app())

    r = client.post("/getShortUrl", json={"url": " https://example.com"})
    assert r.status_code == 404
    assert r.json()["detail"] == "An invalid URL found, provide a valid URL"


def test_url_key_is_case_insensitive():
    client = TestClient(create_app())

    for payload in [{"URL": "https://example.com"}, {"Url": "https://example.com"}]:
        r = client.post("/getShortUrl", json=payload)
        assert r.status_code == 202
        assert r.json()["Response"]["ActualURL"] == "https://example.com"


def test_run_logs_failed_bind(monkeypatch, caplog):
    def failed_bind(*args, **kwargs):
        sys.exit(1)

    monkeypatch.setattr(main_module.uvicorn, "run", failed_bind)

    with caplog.at_level("INFO", logger="url_shortener"), pytest.raises(SystemExit) as exc_info:
        main_module.run()

    assert exc_info.value.code == 1
    assert "could not start the http server" in caplog.text
