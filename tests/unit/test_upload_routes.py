"""
Unit tests for upload and retrieval routes
"""
import os
from unittest.mock import patch

from homework_board.errors import StorageError
from tests.constants import TEST_MAX_UPLOAD_BYTES


class TestUploadEndpoint:
    """Test POST /api/upload"""

    def test_upload_returns_attachment(self, client, settings):
        """Test a successful upload describes the stored file"""
        response = client.post(
            "/api/upload",
            files={"file": ("notes.pdf", b"%PDF-1.4 test", "application/pdf")},
        )
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"type", "url"}
        assert body["type"] == "application/pdf"
        assert body["url"].startswith("/uploads/")
        assert body["url"].endswith("_notes.pdf")

        stored = settings.upload_dir / body["url"][len("/uploads/"):]
        assert stored.read_bytes() == b"%PDF-1.4 test"

    def test_upload_missing_file_field_returns_400(self, client):
        """Test a form without a file field is rejected"""
        response = client.post("/api/upload", data={"other": "value"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Error retrieving file"

    def test_upload_text_field_named_file_returns_400(self, client):
        """Test a plain form value called file is not an upload"""
        response = client.post("/api/upload", data={"file": "not-a-file"})
        assert response.status_code == 400

    def test_upload_without_form_returns_400(self, client):
        """Test a non-multipart body is rejected"""
        response = client.post("/api/upload", json={"file": "x"})
        assert response.status_code == 400

    def test_upload_rejects_path_like_filename(self, client, settings):
        """Test traversal sequences in the declared name are refused"""
        response = client.post(
            "/api/upload",
            files={"file": ("../../evil.sh", b"echo hi", "text/x-sh")},
        )
        # Some clients strip directories from the declared name before sending.
        if response.status_code == 200:
            assert "/" not in response.json()["url"][len("/uploads/"):]
        else:
            assert response.status_code == 400
        assert not (settings.upload_dir.parent / "evil.sh").exists()

    def test_upload_over_limit_returns_413(self, client, settings):
        """Test oversize uploads are refused and nothing is written"""
        payload = b"x" * (TEST_MAX_UPLOAD_BYTES + 1)
        response = client.post(
            "/api/upload",
            files={"file": ("big.bin", payload, "application/octet-stream")},
        )
        assert response.status_code == 413
        assert os.listdir(settings.upload_dir) == []

    def test_upload_declared_length_over_limit_rejected_early(self, client, settings):
        """Test a huge Content-Length is refused before the body is parsed"""
        payload = b"x" * (TEST_MAX_UPLOAD_BYTES + 128 * 1024)
        response = client.post(
            "/api/upload",
            files={"file": ("huge.bin", payload, "application/octet-stream")},
        )
        assert response.status_code == 413
        assert response.json()["detail"] == "File too large"
        assert os.listdir(settings.upload_dir) == []

    def test_upload_without_content_length_returns_411(self, client, settings):
        """Test a streamed body with no declared length is refused unread"""
        body = (
            b"--xyz\r\n"
            b'Content-Disposition: form-data; name="file"; filename="a.txt"\r\n'
            b"Content-Type: text/plain\r\n\r\n"
            b"abc\r\n"
            b"--xyz--\r\n"
        )
        response = client.post(
            "/api/upload",
            content=iter([body]),
            headers={"Content-Type": "multipart/form-data; boundary=xyz"},
        )
        assert response.status_code == 411
        assert response.json()["detail"] == "Content-Length required"
        assert os.listdir(settings.upload_dir) == []

    def test_upload_storage_error_returns_500(self, client):
        """Test write failures map to 500"""
        with patch(
            "homework_board.uploads.store.UploadStore.store",
            side_effect=StorageError("read-only"),
        ):
            response = client.post(
                "/api/upload",
                files={"file": ("a.txt", b"abc", "text/plain")},
            )
        assert response.status_code == 500

    def test_upload_options_returns_empty_200(self, client):
        """Test preflight on the upload endpoint"""
        response = client.options("/api/upload")
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"

    def test_upload_get_returns_405(self, client):
        """Test the upload endpoint only accepts POST"""
        assert client.get("/api/upload").status_code == 405


class TestServeUpload:
    """Test GET /uploads/{filename}"""

    def test_serve_uploaded_file(self, client):
        """Test an uploaded file is served back byte for byte"""
        data = os.urandom(1024)
        url = client.post(
            "/api/upload",
            files={"file": ("notes.pdf", data, "application/pdf")},
        ).json()["url"]

        response = client.get(url)
        assert response.status_code == 200
        assert response.content == data
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["access-control-allow-origin"] == "*"

    def test_serve_supports_range_requests(self, client):
        """Test partial content is served for range requests"""
        url = client.post(
            "/api/upload",
            files={"file": ("a.txt", b"0123456789", "text/plain")},
        ).json()["url"]

        response = client.get(url, headers={"Range": "bytes=2-5"})
        assert response.status_code == 206
        assert response.content == b"2345"

    def test_serve_missing_file_returns_404(self, client):
        """Test unknown names are not found"""
        response = client.get("/uploads/does-not-exist")
        assert response.status_code == 404

    def test_serve_empty_name_returns_400(self, client):
        """Test the bare prefix asks for a filename"""
        response = client.get("/uploads/")
        assert response.status_code == 400

    def test_serve_rejects_encoded_traversal(self, client, settings):
        """Test encoded parent references cannot escape the upload directory"""
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        (settings.data_dir / "math.json").write_text("{}", encoding="utf-8")
        response = client.get("/uploads/..%2Fdata%2Fmath.json")
        assert response.status_code in (400, 404)
