"""Tests for create_nexu.core.remote using an in-memory HTTP transport."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import httpx
import pytest

from create_nexu.core.remote import ARCHIVE_URL, download_template
from create_nexu.errors import RemoteTemplateError


def _archive(files: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_downloads_and_flattens_single_root(tmp_path: Path) -> None:
    requested = []
    payload = _archive(
        {
            "nexu-main/package.json": '{"name": "nexu"}',
            "nexu-main/scripts/setup.mjs": "console.log(1);",
        }
    )

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=payload)

    root = download_template(tmp_path / "dl", client=_client(handler))

    assert requested == [ARCHIVE_URL.format(repo="heccath/nexu", branch="main")]
    assert root == tmp_path / "dl" / "nexu-main"
    assert (root / "scripts" / "setup.mjs").read_text() == "console.log(1);"
    assert not (tmp_path / "dl" / "template.zip").exists()


def test_multiple_roots_are_not_flattened(tmp_path: Path) -> None:
    payload = _archive({"package.json": "{}", "turbo.json": "{}"})
    root = download_template(
        tmp_path, client=_client(lambda request: httpx.Response(200, content=payload))
    )
    assert root == tmp_path
    assert (root / "turbo.json").exists()


def test_token_is_sent_as_bearer(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", " secret ")
    seen = {}
    payload = _archive({"x/a.txt": "a"})

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, content=payload)

    download_template(tmp_path, branch="dev", client=_client(handler))
    assert seen["auth"] == "Bearer secret"


def test_http_error_status(tmp_path: Path) -> None:
    client = _client(lambda request: httpx.Response(404))
    with pytest.raises(RemoteTemplateError, match="HTTP 404") as excinfo:
        download_template(tmp_path, branch="nope", client=client)
    assert excinfo.value.remediation


def test_transport_error(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteTemplateError, match="Could not reach GitHub"):
        download_template(tmp_path, client=_client(handler))


def test_corrupt_archive(tmp_path: Path) -> None:
    client = _client(lambda request: httpx.Response(200, content=b"not a zip"))
    with pytest.raises(RemoteTemplateError, match="not a valid archive"):
        download_template(tmp_path, client=client)
