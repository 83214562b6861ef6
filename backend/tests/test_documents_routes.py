from __future__ import annotations

import pytest

from pdfstamp import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app("testing")
    app.config["OUTPUT_ROOT"] = tmp_path
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_get_default_configuration(client):
    response = client.get("/api/documents/config")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["output_file_path"] == "PIT-8C-modified.pdf"
    assert len(payload["operations"]) == 2
    assert payload["operations"][0]["anchor"] == [462.82, 55.92]


def test_create_with_default_configuration(client, tmp_path):
    response = client.post("/api/documents/create")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["placements"] == 2
    assert (tmp_path / "PIT-8C-modified.pdf").read_bytes().startswith(b"%PDF-1.5")


def test_create_with_posted_configuration(client, tmp_path):
    body = {
        "output_file_path": "custom.pdf",
        "operations": [{"font": ["F1", 10], "anchor": [10, 20], "value": "9.99"}],
    }

    response = client.post("/api/documents/create", json=body)

    assert response.status_code == 200
    assert response.get_json()["placements"] == 1
    assert (tmp_path / "custom.pdf").exists()


def test_modify_stamps_uploaded_template(client, tmp_path, write_form_pdf):
    write_form_pdf([(462.82, 55.92, "11")], name="template.pdf")

    response = client.post(
        "/api/documents/modify",
        json={"input_file_path": "template.pdf", "output_file_path": "stamped.pdf"},
    )

    assert response.status_code == 200
    assert response.get_json() == {
        "status": "ok",
        "output_file_path": str(tmp_path / "stamped.pdf"),
        "placements": 1,
        "pages": [0],
    }


def test_modify_requires_body(client):
    response = client.post("/api/documents/modify")

    assert response.status_code == 400


def test_modify_missing_input_maps_to_not_found(client):
    response = client.post(
        "/api/documents/modify",
        json={"input_file_path": "absent.pdf", "output_file_path": "out.pdf"},
    )

    assert response.status_code == 404
    assert response.get_json() == {"status": "error", "reason": "enoent"}


@pytest.mark.parametrize(
    "body",
    [
        {"input_file_path": "template.pdf"},
        {"output_file_path": "out.pdf"},
        {"input_file_path": "template.pdf", "output_file_path": "out.pdf", "rules": "11"},
    ],
)
def test_modify_rejects_invalid_configuration(client, body):
    response = client.post("/api/documents/modify", json=body)

    assert response.status_code == 422
    assert response.get_json()["reason"] == "invalid_request"


def test_unknown_route_returns_json(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}


@pytest.mark.parametrize("output_path", ["../elsewhere/escaped.pdf", "/tmp/escaped.pdf"])
def test_create_rejects_paths_outside_output_root(client, tmp_path, output_path):
    response = client.post("/api/documents/create", json={"output_file_path": output_path, "operations": []})

    assert response.status_code == 422
    assert response.get_json()["reason"] == "invalid_request"
    assert not (tmp_path.parent / "elsewhere" / "escaped.pdf").exists()


def test_modify_rejects_input_outside_output_root(client, tmp_path, write_form_pdf):
    write_form_pdf([(10, 20, "11")], name="template.pdf")

    response = client.post(
        "/api/documents/modify",
        json={"input_file_path": str(tmp_path / "template.pdf"), "output_file_path": "stamped.pdf"},
    )

    assert response.status_code == 422
    assert not (tmp_path / "stamped.pdf").exists()
