"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from tests._fixtures.widget_builder import WidgetTreeBuilder
from widgetgen.codegen import Codegen
from widgetgen.service import create_app
from widgetgen.service.app import CodegenRequest


@pytest.fixture
def client(widget_tree: WidgetTreeBuilder) -> TestClient:
    def _factory(payload: CodegenRequest) -> Codegen:
        return Codegen.create(payload.cwd or widget_tree.root, overrides=payload.overrides())

    return TestClient(create_app(_factory))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_endpoint(client: TestClient, widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("button")
    widget_tree.write({"loose/notes.txt": "x\n"})

    response = client.post("/generate", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["components"] == ["button"]
    assert data["skipped"] == ["loose"]
    assert Path(data["output_file"]) == widget_tree.output_file
    assert widget_tree.output_file.exists()


def test_validate_endpoint(client: TestClient, widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("menu", entry="function Menu() {}\n")

    response = client.post("/validate", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["components"]["menu"]["status"] == "warning"
    assert data["summary"]["with_warnings"] == 1


def test_codegen_errors_map_to_bad_request(client: TestClient, tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()

    response = client.post("/generate", json={"cwd": str(empty)})

    assert response.status_code == 400
    assert response.json()["kind"] == "scan"


def test_unknown_registry_is_config_error(client: TestClient) -> None:
    response = client.post("/validate", json={"registry": "spring"})

    assert response.status_code == 400
    assert response.json()["kind"] == "config"


@pytest.fixture
def confined_client(widget_tree: WidgetTreeBuilder) -> TestClient:
    return TestClient(create_app(base_dir=widget_tree.root))


def test_confined_service_generates_inside_base(
    confined_client: TestClient, widget_tree: WidgetTreeBuilder
) -> None:
    widget_tree.component("button")

    response = confined_client.post("/generate", json={})

    assert response.status_code == 200
    assert Path(response.json()["output_file"]) == widget_tree.output_file.resolve()


@pytest.mark.parametrize(
    "payload",
    [
        {"cwd": ".."},
        {"output_file": "../outside.ts"},
        {"components_dir": "/"},
    ],
)
def test_confined_service_rejects_paths_outside_base(
    confined_client: TestClient, widget_tree: WidgetTreeBuilder, payload: dict
) -> None:
    widget_tree.component("button")

    response = confined_client.post("/generate", json=payload)

    assert response.status_code == 400
    assert response.json()["kind"] == "config"
    assert "must stay inside" in response.json()["detail"]
    assert not (widget_tree.root.parent / "outside.ts").exists()


def test_confined_service_refuses_python_config(
    confined_client: TestClient, widget_tree: WidgetTreeBuilder
) -> None:
    marker = widget_tree.root / "ran.txt"
    (widget_tree.root / "evil.py").write_text(
        f"open({str(marker)!r}, 'w').write('x')\nconfig = {{}}\n", encoding="utf-8"
    )

    response = confined_client.post("/validate", json={"config_path": "evil.py"})

    assert response.status_code == 400
    assert response.json()["kind"] == "config"
    assert not marker.exists()
