"""API tests with a scripted transport injected through dependency overrides."""

import base64
import json
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from conftest import FakeTransport
from api.main import app
from api.dependencies import (
    get_settings_store, get_document_store, get_result_store, get_output_dir,
    get_transport_factory, get_fallback_models
)
from llm.fallback import RATE_LIMIT_MESSAGE
from models.session_store import DocumentStore, ResultStore
from utils.settings_store import SettingsStore, SettingsUpdate

MODELS = ("model-a", "model-b", "model-c")


class ServiceError(Exception):
    pass


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    state = {
        "settings": SettingsStore(str(tmp_path / "settings.yaml")),
        "documents": DocumentStore(),
        "results": ResultStore(),
        "transport": FakeTransport({}),
        "api_keys": [],
    }

    def transport_factory():
        def build(api_key):
            state["api_keys"].append(api_key)
            return state["transport"]
        return build

    app.dependency_overrides[get_settings_store] = lambda: state["settings"]
    app.dependency_overrides[get_document_store] = lambda: state["documents"]
    app.dependency_overrides[get_result_store] = lambda: state["results"]
    app.dependency_overrides[get_output_dir] = lambda: tmp_path / "outputs"
    app.dependency_overrides[get_transport_factory] = transport_factory
    app.dependency_overrides[get_fallback_models] = lambda: MODELS
    yield state
    app.dependency_overrides.clear()


@pytest.fixture
def client(env):
    return TestClient(app)


@pytest.fixture
def configured(env):
    env["settings"].save(SettingsUpdate(api_key="AIzaSyTestKey1234", model="model-b"))
    return env


def inline_document(pdf_bytes):
    return {
        "file_name": "giao_an.pdf",
        "mime_type": "application/pdf",
        "data_base64": base64.b64encode(pdf_bytes).decode("ascii"),
    }


def generate_body(pdf_bytes, **config):
    base = {"subject": "Toán", "school_level": "primary", "grade": "2"}
    base.update(config)
    return {"config": base, "document": inline_document(pdf_bytes)}


class TestSettingsRoutes:
    def test_needs_configuration_without_key(self, client):
        response = client.get("/api/settings")
        assert response.status_code == 200
        assert response.json()["needs_configuration"] is True
        assert client.get("/health").json()["gemini_api_configured"] is False

    def test_update_settings(self, client, env):
        response = client.put("/api/settings", json={"api_key": "AIzaSyTestKey1234", "model": "model-c"})
        assert response.status_code == 200
        body = response.json()
        assert body == {"model": "model-c", "api_key_masked": "AIza*********1234", "needs_configuration": False}
        assert env["settings"].path.exists()

    def test_blank_key_rejected(self, client):
        response = client.put("/api/settings", json={"api_key": " ", "model": "model-a"})
        assert response.status_code == 422

    def test_models_catalog(self, client):
        ids = [m["id"] for m in client.get("/api/settings/models").json()["models"]]
        assert ids == ["gemini-3-flash-preview", "gemini-3-pro-preview", "gemini-2.5-flash"]


class TestOptions:
    def test_form_options(self, client):
        body = client.get("/api/lesson-plans/options").json()
        assert body["grades"]["secondary"] == ["6", "7", "8", "9"]
        assert "Toán" in body["subjects"]
        assert body["math_rendering"]["throwOnError"] is False
        assert {"left": "\\[", "right": "\\]", "display": True} in body["math_rendering"]["delimiters"]


class TestDocuments:
    def test_upload_encodes_in_background(self, client, pdf_bytes):
        response = client.post("/api/documents", files={"file": ("giao_an.pdf", pdf_bytes, "application/pdf")})
        assert response.status_code == 200
        document_id = response.json()["document_id"]
        status = client.get(f"/api/documents/{document_id}").json()
        assert status["status"] == "ready"
        assert status["mime_type"] == "application/pdf"

    def test_unsupported_type_rejected(self, client):
        response = client.post("/api/documents", files={"file": ("plan.docx", b"PK..", "application/octet-stream")})
        assert response.status_code == 400

    def test_oversized_upload_rejected(self, client, monkeypatch):
        monkeypatch.setattr("api.routes.documents.MAX_DOCUMENT_BYTES", 8)
        response = client.post("/api/documents", files={"file": ("a.png", b"0123456789", "image/png")})
        assert response.status_code == 413

    def test_unknown_document(self, client):
        assert client.get("/api/documents/missing").status_code == 404


class TestGenerate:
    def test_validation_errors_reported_together(self, client, configured):
        response = client.post("/api/lesson-plans/generate", json={"config": {"subject": ""}})
        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == {
            "file": "Vui lòng tải lên giáo án",
            "subject": "Vui lòng chọn môn học",
        }
        assert configured["transport"].calls == []

    def test_document_still_encoding(self, client, configured, pdf_bytes):
        document = configured["documents"].register("giao_an.pdf", "application/pdf", len(pdf_bytes))
        response = client.post("/api/lesson-plans/generate", json={
            "config": {"subject": "Toán"},
            "document_id": document.document_id,
        })
        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == {"file": "Đang xử lý file..."}
        assert configured["transport"].calls == []

    def test_missing_api_key_blocks_generation(self, client, env, pdf_bytes):
        response = client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes))
        assert response.status_code == 428
        assert env["transport"].calls == []

    def test_generate_with_fallback(self, client, configured, pdf_bytes, sample_plan_json):
        configured["transport"] = FakeTransport({
            "model-b": ServiceError("503 UNAVAILABLE"),
            "model-a": sample_plan_json,
            "model-c": sample_plan_json,
        })
        response = client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes))
        assert response.status_code == 200
        body = response.json()
        assert body["plan"]["summary"]["topic"] == "Phép cộng có nhớ"
        assert "fullPlanHtml" in body["plan"]
        assert configured["transport"].calls == ["model-b", "model-a"]
        assert configured["api_keys"] == ["AIzaSyTestKey1234"]

        fetched = client.get(f"/api/lesson-plans/{body['result_id']}")
        assert fetched.json()["plan"] == body["plan"]

    def test_generate_from_uploaded_document(self, client, configured, pdf_bytes, sample_plan_json):
        configured["transport"] = FakeTransport({"model-b": sample_plan_json})
        upload = client.post("/api/documents", files={"file": ("giao_an.pdf", pdf_bytes, "application/pdf")})
        response = client.post("/api/lesson-plans/generate", json={
            "config": {"subject": "Toán"},
            "document_id": upload.json()["document_id"],
        })
        assert response.status_code == 200

    def test_rate_limit_message(self, client, configured, pdf_bytes):
        configured["transport"] = FakeTransport({
            "model-b": ServiceError("boom"),
            "model-a": ServiceError("boom"),
            "model-c": ServiceError("429 RESOURCE_EXHAUSTED"),
        })
        response = client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes))
        assert response.status_code == 429
        assert response.json()["detail"] == RATE_LIMIT_MESSAGE

    def test_other_failure_surfaces_last_error(self, client, configured, pdf_bytes):
        configured["transport"] = FakeTransport({
            "model-b": ServiceError("first"),
            "model-a": ServiceError("second"),
            "model-c": ServiceError("last one"),
        })
        response = client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes))
        assert response.status_code == 502
        assert response.json()["detail"] == "last one"


class TestResults:
    @pytest.fixture
    def result_id(self, client, configured, pdf_bytes, sample_plan_json):
        configured["transport"] = FakeTransport({"model-b": sample_plan_json})
        return client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes)).json()["result_id"]

    def test_word_export(self, client, result_id):
        response = client.get(f"/api/lesson-plans/{result_id}/export/word")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/msword")
        assert quote("Cai_Tien_Phép_cộng_có_nhớ.doc") in response.headers["content-disposition"]
        assert response.content.startswith(b"\xef\xbb\xbf\n      <html")
        assert response.content.endswith(b"</div></div></body></html>")

    def test_simulation_export(self, client, result_id):
        response = client.get(f"/api/lesson-plans/{result_id}/export/simulation")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.text == "<!DOCTYPE html><html><body><p>$x^2$</p></body></html>"

    def test_simulation_export_without_simulation(self, client, configured, pdf_bytes, sample_plan_dict):
        del sample_plan_dict["simulation"]
        configured["transport"] = FakeTransport({"model-b": json.dumps(sample_plan_dict)})
        result_id = client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes)).json()["result_id"]
        assert client.get(f"/api/lesson-plans/{result_id}/export/simulation").status_code == 404

    def test_reset_discards_result(self, client, result_id):
        assert client.delete(f"/api/lesson-plans/{result_id}").status_code == 200
        assert client.get(f"/api/lesson-plans/{result_id}").status_code == 404
        assert client.get(f"/api/lesson-plans/{result_id}/export/word").status_code == 404

    def test_reset_removes_exported_files(self, client, result_id, tmp_path):
        client.get(f"/api/lesson-plans/{result_id}/export/word")
        client.get(f"/api/lesson-plans/{result_id}/export/simulation")
        assert (tmp_path / "outputs" / result_id).exists()
        assert client.delete(f"/api/lesson-plans/{result_id}").status_code == 200
        assert not (tmp_path / "outputs" / result_id).exists()


class TestExportNames:
    @pytest.fixture
    def slash_result_id(self, client, configured, pdf_bytes, sample_plan_dict):
        sample_plan_dict["summary"]["topic"] = "Phân số a/b"
        sample_plan_dict["simulation"]["title"] = "Mô phỏng 1/2"
        configured["transport"] = FakeTransport({"model-b": json.dumps(sample_plan_dict, ensure_ascii=False)})
        return client.post("/api/lesson-plans/generate", json=generate_body(pdf_bytes)).json()["result_id"]

    def test_word_export_topic_with_slash(self, client, slash_result_id):
        response = client.get(f"/api/lesson-plans/{slash_result_id}/export/word")
        assert response.status_code == 200
        assert quote("Cai_Tien_Phân_số_a/b.doc") in response.headers["content-disposition"]
        assert response.content.startswith(b"\xef\xbb\xbf")

    def test_simulation_export_title_with_slash(self, client, slash_result_id):
        response = client.get(f"/api/lesson-plans/{slash_result_id}/export/simulation")
        assert response.status_code == 200
        assert quote("Mo_phong_Mô_phỏng_1/2.html") in response.headers["content-disposition"]
        assert response.text == "<!DOCTYPE html><html><body><p>$x^2$</p></body></html>"


class TestTransportReuse:
    def test_one_client_per_api_key(self, monkeypatch):
        from api import app_context
        from api import dependencies

        built = []

        class RecordingTransport:
            def __init__(self, api_key):
                built.append(api_key)

        monkeypatch.setattr(dependencies, "GeminiTransport", RecordingTransport)
        monkeypatch.setattr(app_context, "gemini_transports", {})
        factory = dependencies.get_transport_factory()

        first = factory("key-one")
        assert factory("key-one") is first
        assert factory("key-two") is not first
        assert built == ["key-one", "key-two"]
        assert list(app_context.gemini_transports) == ["key-two"]
