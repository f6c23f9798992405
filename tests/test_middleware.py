"""Tests for the DOM components dev middleware."""

from __future__ import annotations

import html
import logging
import re
from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from dombridge.identity import content_hash, to_file_url
from dombridge.middleware import coerce_url, warn_unstable
from dombridge.service import create_app

_SCRIPT_SRC = re.compile(r'<script crossorigin src="([^"]+)"></script>')


@pytest.fixture
def client(project_builder, settle) -> TestClient:
    app = create_app(project_builder.config(), settle=settle)

    @app.get("/other/path")
    async def other() -> dict[str, bool]:
        return {"ok": True}

    return TestClient(app)


def _script_src(body: str) -> str:
    match = _SCRIPT_SRC.search(body)
    assert match is not None, body
    return html.unescape(match.group(1))


def test_unrelated_paths_fall_through(client: TestClient) -> None:
    response = client.get("/other/path")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_invalid_file_parameter_is_rejected(client: TestClient) -> None:
    response = client.get("/_expo/@dom", params={"file": "not-a-file-url"})

    assert response.status_code == 400
    assert response.text == "Invalid file path: not-a-file-url"


def test_missing_file_parameter_is_rejected(client: TestClient) -> None:
    response = client.get("/_expo/@dom/Widget.js")

    assert response.status_code == 400
    assert "Invalid file path: None" in response.text


def test_dom_request_serves_shell_with_bundle_url(client: TestClient, project_builder, settle) -> None:
    project_builder.write(
        {"src/Widget.js": '"use dom";\nexport default function Widget() { return null; }\n'}
    )
    file_url = to_file_url(project_builder.path("src/Widget.js"))
    digest = content_hash(file_url)

    response = client.get("/_expo/@dom/Widget.js", params={"file": file_url})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<title>Widget.js</title>" in response.text

    entry = project_builder.path(f".expo/@dom/{digest}.js")
    assert entry.exists()
    contents = entry.read_text(encoding="utf-8")
    assert 'registerDOMComponent(() => import("../../src/Widget.js"), "../../src/Widget.js");' in contents
    assert settle.calls == [entry]

    bundle_url = urlsplit(_script_src(response.text))
    query = {key: values[0] for key, values in parse_qs(bundle_url.query).items()}
    assert bundle_url.netloc == "localhost:8081"
    assert bundle_url.path == f"/.expo/@dom/{digest}.bundle"
    assert query["platform"] == "web"
    assert query["transform.bytecode"] == "0"
    assert query["transform.dom"] == "true"
    assert query["lazy"] == "true"
    assert query["transform.engine"] == "hermes"


@pytest.mark.parametrize("basename", ["What%3F.js", "A%23B.js"])
def test_escaped_basename_keeps_file_query(client: TestClient, project_builder, basename: str) -> None:
    file_url = to_file_url(project_builder.path("src/Widget.js"))

    response = client.get(f"/_expo/@dom/{basename}", params={"file": file_url})

    assert response.status_code == 200
    assert "<title>Widget.js</title>" in response.text
    assert project_builder.path(f".expo/@dom/{content_hash(file_url)}.js").exists()


def test_bundle_url_inherits_base_options(project_builder, settle) -> None:
    config = project_builder.config()
    config.bundler.mode = "production"
    config.bundler.minify = True
    config.dev_server_url = "http://192.168.1.10:19000"
    client = TestClient(create_app(config, settle=settle))

    file_url = to_file_url(project_builder.path("src/Widget.js"))
    response = client.get("/_expo/@dom", params={"file": file_url})

    bundle_url = urlsplit(_script_src(response.text))
    query = parse_qs(bundle_url.query)
    assert bundle_url.netloc == "192.168.1.10:19000"
    assert query["dev"] == ["false"]
    assert query["minify"] == ["true"]
    assert query["platform"] == ["web"]


def test_bundle_module_name_is_relative_to_server_root(project_builder, settle) -> None:
    config = project_builder.config(server_root=project_builder.root.parent)
    client = TestClient(create_app(config, settle=settle))
    file_url = to_file_url(project_builder.path("src/Widget.js"))

    response = client.get("/_expo/@dom", params={"file": file_url})

    bundle_url = urlsplit(_script_src(response.text))
    assert bundle_url.path == f"/project/.expo/@dom/{content_hash(file_url)}.bundle"


def test_experimental_warning_is_logged_once(
    client: TestClient, project_builder, caplog: pytest.LogCaptureFixture, monkeypatch
) -> None:
    monkeypatch.setattr(logging.getLogger("dombridge"), "propagate", True)
    caplog.set_level(logging.WARNING, logger="dombridge.middleware")
    file_url = to_file_url(project_builder.path("src/Widget.js"))

    client.get("/_expo/@dom", params={"file": file_url})
    client.get("/_expo/@dom", params={"file": file_url})
    client.get("/_expo/@dom", params={"file": "bad"})

    warnings = [
        record
        for record in caplog.records
        if record.name == "dombridge.middleware"
        and "experimental DOM Components" in record.getMessage()
    ]
    assert len(warnings) == 1


def test_warn_unstable_reports_first_call_only() -> None:
    assert warn_unstable() is True
    assert warn_unstable() is False


def test_coerce_url_accepts_relative_and_absolute_targets() -> None:
    relative = coerce_url("/_expo/@dom?file=x")
    assert relative.path == "/_expo/@dom"
    assert relative.query == "file=x"

    absolute = coerce_url("http://devhost:8081/_expo/@dom/W.js?file=y")
    assert absolute.netloc == "devhost:8081"
    assert absolute.path == "/_expo/@dom/W.js"
