"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints and the scanner WebSocket.

==============================================================================
"""

import base64

import pytest
from fastapi.testclient import TestClient

from scanflow.core.dependencies import get_upload_validator
from scanflow.main import app
from scanflow.utils.validators import UploadValidator


SESSION = "/api/v1/sessions/bench-1"


def camera_batch(client: TestClient, *texts: str, mode: str = "Standard") -> dict:
    response = client.post(
        f"{SESSION}/camera-batch",
        json={"symbols": [{"text": t, "format": "CODE128"} for t in texts], "mode": mode},
    )
    assert response.status_code == 200
    return response.json()


def upload(client: TestClient, *files, mode: str = "Standard"):
    return client.post(
        f"{SESSION}/uploads",
        files=[("files", f) for f in files],
        data={"mode": mode},
    )


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ["healthy", "degraded"]
        assert data["details"]["open_sessions"] == 0

    def test_readiness_probe(self, client: TestClient):
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness_probe(self, client: TestClient):
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True


class TestClassifyEndpoints:
    """Tests for classification endpoints."""

    def test_classify_standard(self, client: TestClient):
        response = client.post(
            "/api/v1/classify",
            json={"values": ["ABC1234WXYZ", "nothing"], "mode": "Standard"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "Standard"
        assert [r["category"] for r in data["results"]] == ["Serial Number", "Unknown"]

    def test_classify_unique(self, client: TestClient):
        response = client.post(
            "/api/v1/classify",
            json={"values": ["ABC1234WXYZ", "JPN1234A567"], "mode": "Unique"},
        )
        assert [r["category"] for r in response.json()["results"]] == ["PCA", "ASY-OTL"]

    def test_classify_default_mode(self, client: TestClient):
        response = client.post("/api/v1/classify", json={"values": ["ABC1234WXYZ"]})
        assert response.json()["mode"] == "Standard"

    def test_classify_unknown_mode(self, client: TestClient):
        response = client.post("/api/v1/classify", json={"values": ["x"], "mode": "Fancy"})
        assert response.status_code == 422

    def test_categories(self, client: TestClient):
        data = client.get("/api/v1/classify/categories").json()
        assert "Unknown" in data["categories"]
        assert data["preferred_order"][0] == "ASY"


class TestSessionEndpoints:
    """Tests for session group endpoints."""

    def test_new_session_is_empty(self, client: TestClient):
        data = client.get(SESSION).json()
        assert data["session_id"] == "bench-1"
        assert data["current_group"]["items"] == []
        assert data["current_group"]["source_kind"] == "Camera"
        assert data["finalized_groups"] == []

    def test_camera_batch_replaces_category_slot(self, client: TestClient):
        camera_batch(client, "PCA-12345-01-A1", "ABC1234WXYZ")
        group = camera_batch(client, "XYZ9876ABCD")

        assert [i["value"] for i in group["items"]] == ["XYZ9876ABCD", "PCA-12345-01-A1"]

    def test_complete_and_discard(self, client: TestClient):
        camera_batch(client, "ABC1234WXYZ")
        completed = client.post(f"{SESSION}/current/complete").json()
        assert completed["completed"]["state"] == "Done"
        assert completed["current_group"]["items"] == []

        camera_batch(client, "DEV-12345")
        discarded = client.post(f"{SESSION}/current/discard").json()
        assert discarded["items"] == []

        data = client.get(SESSION).json()
        assert [g["items"][0]["value"] for g in data["finalized_groups"]] == ["ABC1234WXYZ"]

    def test_complete_empty_group(self, client: TestClient):
        response = client.post(f"{SESSION}/current/complete")
        assert response.status_code == 200
        assert response.json()["completed"] is None

    def test_remove_and_correct_item(self, client: TestClient):
        group = camera_batch(client, "ASY-12345-001-A1", "who knows")
        unknown_id = group["items"][1]["id"]

        response = client.patch(f"{SESSION}/current/items/{unknown_id}", json={"category": "Deviation"})
        assert response.status_code == 200
        assert [i["category"] for i in response.json()["items"]] == ["ASY", "Deviation"]

        response = client.delete(f"{SESSION}/current/items/{unknown_id}")
        assert [i["value"] for i in response.json()["items"]] == ["ASY-12345-001-A1"]

    def test_blank_category_rejected(self, client: TestClient):
        group = camera_batch(client, "ABC1234WXYZ")
        response = client.patch(
            f"{SESSION}/current/items/{group['items'][0]['id']}",
            json={"category": "   "},
        )
        assert response.status_code == 422

    def test_remove_unknown_item(self, client: TestClient):
        response = client.delete(f"{SESSION}/current/items/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ITEM_NOT_FOUND"

    def test_remove_finalized_group(self, client: TestClient):
        camera_batch(client, "ABC1234WXYZ")
        client.post(f"{SESSION}/current/complete")

        assert client.delete(f"{SESSION}/finalized/3").json()["success"] is False
        assert client.delete(f"{SESSION}/finalized/0").json()["success"] is True
        assert client.get(SESSION).json()["finalized_groups"] == []

    def test_sessions_are_isolated(self, client: TestClient):
        camera_batch(client, "ABC1234WXYZ")
        other = client.get("/api/v1/sessions/bench-2").json()
        assert other["current_group"]["items"] == []

    def test_drop_session(self, client: TestClient):
        camera_batch(client, "ABC1234WXYZ")
        assert client.delete(SESSION).json()["success"] is True
        assert client.get(SESSION).json()["current_group"]["items"] == []

    def test_collected_values(self, client: TestClient):
        response = client.post(
            f"{SESSION}/collected",
            json={"symbols": [
                {"text": "abc", "format": "QRCODE"},
                {"text": "ABC", "format": "QRCODE"},
                {"text": "DEV-12345", "format": "CODE39"},
            ]},
        )
        data = response.json()
        assert data["added"] == 2
        assert [i["value"] for i in data["items"]] == ["DEV-12345", "abc"]

        client.delete(f"{SESSION}/collected")
        assert client.get(f"{SESSION}/collected").json()["items"] == []


class TestExportEndpoints:
    """Tests for export endpoints."""

    def test_export_group_and_item(self, client: TestClient):
        group = camera_batch(client, "DEV-12345", "ABC1234WXYZ")

        response = client.get(f"{SESSION}/groups/{group['id']}/export")
        assert response.json()["text"] == "ABC1234WXYZ\nDEV-12345"
        assert response.json()["count"] == 2

        item = group["items"][1]
        response = client.get(f"{SESSION}/groups/{group['id']}/items/{item['id']}/export")
        assert response.json()["text"] == "DEV-12345"

    def test_export_empty_group(self, client: TestClient):
        group = client.get(SESSION).json()["current_group"]
        response = client.get(f"{SESSION}/groups/{group['id']}/export")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOTHING_TO_EXPORT"
        assert response.json()["error"]["message"] == "Nothing to copy."


class TestUploadEndpoints:
    """Tests for image upload decoding."""

    def test_one_group_per_image(self, client: TestClient):
        response = upload(
            client,
            ("a.jpg", b"label-a", "image/jpeg"),
            ("broken.png", b"not an image", "image/png"),
            ("b.jpg", b"label-b", "image/jpeg"),
        )
        assert response.status_code == 200
        data = response.json()

        assert [g["name"] for g in data["groups"]] == ["a.jpg", "broken.png", "b.jpg"]
        assert [g["state"] for g in data["groups"]] == ["Done", "Error", "Done"]
        assert [i["value"] for i in data["groups"][0]["items"]] == [
            "ASY-12345-001-A1", "ABC1234WXYZ", "PCA-12345-01-A1",
        ]
        assert data["progress"][0] == 5
        assert data["progress"][-1] == 100

        finalized = client.get(SESSION).json()["finalized_groups"]
        assert [g["source_kind"] for g in finalized] == ["Upload"] * 3

    def test_unsupported_type(self, client: TestClient):
        response = upload(client, ("doc.pdf", b"%PDF", "application/pdf"))
        assert response.status_code == 415
        assert response.json()["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_file_too_large_does_not_abort_batch(self, client: TestClient):
        app.dependency_overrides[get_upload_validator] = lambda: UploadValidator(["image/jpeg"], max_bytes=8)

        response = upload(
            client,
            ("a.jpg", b"label-a", "image/jpeg"),
            ("big.jpg", b"x" * 9, "image/jpeg"),
        )
        assert response.status_code == 200
        groups = response.json()["groups"]
        assert [g["state"] for g in groups] == ["Done", "Error"]
        assert len(groups[0]["items"]) == 3
        assert groups[1]["items"] == []
        assert groups[1]["error"] == "File too large (limit 8 bytes)"

        finalized = client.get(SESSION).json()["finalized_groups"]
        assert [g["name"] for g in finalized] == ["a.jpg", "big.jpg"]

    def test_invalid_mode(self, client: TestClient):
        response = upload(client, ("a.jpg", b"label-a", "image/jpeg"), mode="Fancy")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MODE"


class TestReorderEndpoints:
    """Tests for reorder lists."""

    @pytest.fixture
    def uploaded(self, client: TestClient) -> TestClient:
        upload(
            client,
            ("a.jpg", b"label-a", "image/jpeg"),
            ("blank.jpg", b"blank", "image/jpeg"),
            ("b.jpg", b"label-b", "image/jpeg"),
        )
        return client

    def test_open_move_export(self, uploaded: TestClient):
        opened = uploaded.post(f"{SESSION}/reorders", json={"source_kind": "Upload"}).json()
        reorder_id = opened["reorder_id"]
        assert [e["display_key"] for e in opened["entries"]] == [
            "ASY-12345-001-A1", "ABC1234WXYZ", "PCA-12345-01-A1", "DEV-12345",
        ]

        moved = uploaded.post(
            f"{SESSION}/reorders/{reorder_id}/move",
            json={"from_index": 3, "to_index": 0},
        ).json()
        assert moved["entries"][0]["display_key"] == "DEV-12345"

        text = uploaded.get(f"{SESSION}/reorders/{reorder_id}/export").json()["text"]
        assert text.splitlines() == ["DEV-12345", "ASY-12345-001-A1", "ABC1234WXYZ", "PCA-12345-01-A1"]

        assert reorder_id in uploaded.get(SESSION).json()["open_reorders"]

    def test_scope_must_be_exclusive(self, uploaded: TestClient):
        response = uploaded.post(f"{SESSION}/reorders", json={})
        assert response.status_code == 422

    def test_invalid_move(self, uploaded: TestClient):
        reorder_id = uploaded.post(f"{SESSION}/reorders", json={"source_kind": "Upload"}).json()["reorder_id"]
        response = uploaded.post(
            f"{SESSION}/reorders/{reorder_id}/move",
            json={"from_index": 0, "to_index": 99},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MOVE"

    def test_cancel(self, uploaded: TestClient):
        reorder_id = uploaded.post(f"{SESSION}/reorders", json={"source_kind": "Upload"}).json()["reorder_id"]
        assert uploaded.delete(f"{SESSION}/reorders/{reorder_id}").json()["success"] is True

        response = uploaded.get(f"{SESSION}/reorders/{reorder_id}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "REORDER_NOT_FOUND"

    def test_unknown_group_scope(self, client: TestClient):
        response = client.post(
            f"{SESSION}/reorders",
            json={"group_id": "00000000-0000-0000-0000-000000000000"},
        )
        assert response.status_code == 404


class TestSubmission:
    """Tests for submission to the local barcode store."""

    def test_submit_finalized_groups(self, client: TestClient):
        camera_batch(client, "ABC1234WXYZ", "DEV-12345")
        client.post(f"{SESSION}/current/complete")

        result = client.post(f"{SESSION}/submit", json={}).json()
        assert result["success"] is True
        assert result["data"] == 2

        again = client.post(f"{SESSION}/submit", json={}).json()
        assert again["success"] is True
        assert again["data"] == 0

        stored = client.get("/api/v1/scanned-barcodes").json()["data"]
        assert sorted(row["value"] for row in stored) == ["ABC1234WXYZ", "DEV-12345"]
        assert "scannedTime" in stored[0]

    def test_submit_reorder_list(self, client: TestClient):
        upload(client, ("a.jpg", b"label-a", "image/jpeg"))
        reorder_id = client.post(f"{SESSION}/reorders", json={"source_kind": "Upload"}).json()["reorder_id"]

        result = client.post(f"{SESSION}/submit", json={"reorder_id": reorder_id}).json()
        assert result["data"] == 3

    def test_submit_nothing(self, client: TestClient):
        result = client.post(f"{SESSION}/submit", json={}).json()
        assert result["success"] is False
        assert result["errorCode"] == "NO_ITEMS"


class TestScannedBarcodeEndpoints:
    """Tests for the barcode store endpoints."""

    def test_add_list_delete(self, client: TestClient):
        body = [
            {"value": " ABC1234WXYZ ", "format": "CODE128", "category": "Serial Number",
             "scannedAt": "2024-03-01T09:30:00Z"},
            {"value": "ABC1234WXYZ", "format": "CODE128", "category": "Serial Number",
             "scannedAt": "2024-03-01T09:30:00Z"},
        ]
        result = client.post("/api/v1/scanned-barcodes", json=body).json()
        assert result["data"] == 1
        assert result["message"] == "1 new barcode(s) saved. 1 duplicate/existing value(s) skipped."

        rows = client.get("/api/v1/scanned-barcodes").json()["data"]
        assert rows[0]["value"] == "ABC1234WXYZ"

        deleted = client.delete(f"/api/v1/scanned-barcodes/{rows[0]['id']}").json()
        assert deleted["data"] == 1
        assert deleted["message"] == "Barcode value (ABC1234WXYZ) deleted."

    def test_add_empty(self, client: TestClient):
        result = client.post("/api/v1/scanned-barcodes", json=[]).json()
        assert result["success"] is False
        assert result["message"] == "No barcode items provided."


class TestScannerWebSocket:
    """Tests for the live camera WebSocket."""

    @staticmethod
    def receive(ws, count: int) -> dict:
        """Receive ``count`` messages keyed by type (event order may interleave)."""
        messages = {}
        for _ in range(count):
            message = ws.receive_json()
            messages.setdefault(message["type"], message)
        return messages

    def test_capture_and_complete(self, client: TestClient):
        with client.websocket_connect("/ws/scan?session_id=bench-1") as ws:
            ws.send_json({"type": "init", "mode": "Standard"})
            init = ws.receive_json()
            assert init["type"] == "init"
            assert init["mode"] == "Standard"

            ws.send_json({"type": "symbols", "symbols": [{"text": "ABC1234WXYZ", "format": "CODE128"}]})
            messages = self.receive(ws, 2)
            assert messages["detection"]["detections"][0]["category"] == "Serial Number"
            assert messages["event"]["kind"] == "current_updated"

            frame = base64.b64encode(b"label-b").decode()
            ws.send_json({"type": "frame", "frame": frame})
            messages = self.receive(ws, 2)
            values = [i["value"] for i in messages["detection"]["current_group"]["items"]]
            assert values == ["ABC1234WXYZ", "DEV-12345"]

            ws.send_json({"type": "complete"})
            messages = self.receive(ws, 2)
            assert messages["completed"]["group"]["state"] == "Done"
            assert messages["event"]["kind"] == "group_finalized"

            ws.send_json({"type": "stop"})

        finalized = client.get(SESSION).json()["finalized_groups"]
        assert [i["value"] for i in finalized[0]["items"]] == ["ABC1234WXYZ", "DEV-12345"]

    def test_unknown_message(self, client: TestClient):
        with client.websocket_connect("/ws/scan?session_id=bench-1") as ws:
            ws.send_json({"type": "dance"})
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["code"] == "UNKNOWN_MESSAGE"
            ws.send_json({"type": "stop"})

    @pytest.mark.parametrize("message", [
        {"type": "symbols", "symbols": ["ABC1234WXYZ"]},
        {"type": "symbols", "symbols": [{"text": "ABC1234WXYZ", "format": None}]},
        {"type": "symbols", "symbols": "ABC1234WXYZ"},
        {"type": "frame", "frame": 123},
    ])
    def test_malformed_message_keeps_connection(self, client: TestClient, message: dict):
        with client.websocket_connect("/ws/scan?session_id=bench-1") as ws:
            ws.send_json(message)
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["code"] == "INVALID_MESSAGE"

            ws.send_json({"type": "symbols", "symbols": [{"text": "ABC1234WXYZ", "format": "CODE128"}]})
            messages = self.receive(ws, 2)
            assert messages["detection"]["detections"][0]["category"] == "Serial Number"
            ws.send_json({"type": "stop"})

        current = client.get(SESSION).json()["current_group"]
        assert [i["value"] for i in current["items"]] == ["ABC1234WXYZ"]

    def test_non_object_message(self, client: TestClient):
        with client.websocket_connect("/ws/scan?session_id=bench-1") as ws:
            ws.send_json(["init"])
            error = ws.receive_json()
            assert error["code"] == "INVALID_MESSAGE"
            ws.send_json({"type": "stop"})

    def test_invalid_mode(self, client: TestClient):
        with client.websocket_connect("/ws/scan?session_id=bench-1") as ws:
            ws.send_json({"type": "init", "mode": "Fancy"})
            error = ws.receive_json()
            assert error["code"] == "INVALID_MODE"
