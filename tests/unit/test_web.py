"""Tests for web application functionality."""

from fastapi.testclient import TestClient

from apps.web.main import app


class TestWebApp:
    """Test web application endpoints."""

    def setup_method(self):
        """Setup test fixtures."""
        self.client = TestClient(app)

    def test_home_page(self):
        """Should serve the main HTML page."""
        response = self.client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "testcrate" in response.text

    def test_analyze_api_success(self):
        """Should analyze manifests and render files."""
        response = self.client.post("/api/analyze", json={
            "files": {
                "requirements.txt": "pytest\nplaywright==1.55.0\n",
                "pytest.ini": "[pytest]\naddopts = --browser-channel chrome\n",
            },
        })

        assert response.status_code == 200
        data = response.json()

        assert data["framework"] == "pytest"
        assert data["analysis"]["playwright_version"] == "1.55.0"
        assert data["configuration"]["platforms"] == ["linux/amd64"]
        assert "Google Chrome" in data["configuration"]["warning_message"]
        assert [f["name"] for f in data["files"]] == [".dockerignore", "entrypoint.sh", "Dockerfile"]
        assert "RUN playwright install chrome" in data["files"][2]["content"]

    def test_analyze_api_no_browser(self):
        response = self.client.post("/api/analyze", json={
            "files": {"requirements.txt": "pytest\nselenium\n"},
            "no_browser": True,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["configuration"]["base_image"] == "python:3.11-slim"

    def test_analyze_api_framework_only(self):
        """Should accept an empty project when the framework is given."""
        response = self.client.post("/api/analyze", json={"files": {}, "framework": "pytest"})

        assert response.status_code == 200
        assert response.json()["analysis"]["is_api_only"] is True

    def test_analyze_api_no_files(self):
        response = self.client.post("/api/analyze", json={"files": {"README.md": "hi"}})

        assert response.status_code == 400
        assert "No manifest files" in response.json()["detail"]

    def test_analyze_api_unknown_framework(self):
        """Should return 400 when no framework can be detected."""
        response = self.client.post("/api/analyze", json={"files": {"requirements.txt": "requests\n"}})

        assert response.status_code == 400
        assert "Could not detect" in response.json()["detail"]

    def test_analyze_api_bad_framework(self):
        response = self.client.post("/api/analyze", json={"files": {}, "framework": "cypress"})
        assert response.status_code == 400

    def test_analyze_api_bad_platform(self):
        response = self.client.post("/api/analyze", json={
            "files": {"requirements.txt": "pytest\n"},
            "platforms": ["linux/s390x"],
        })
        assert response.status_code == 400

    def test_upload_files(self):
        """Should analyze uploaded manifest files."""
        response = self.client.post(
            "/api/upload",
            files=[
                ("files", ("package.json", b'{"devDependencies": {"@playwright/test": "^1.46.0"}}', "application/json")),
            ],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["framework"] == "playwright"
        assert data["configuration"]["base_image"] == "mcr.microsoft.com/playwright:v1.46.0-jammy"

    def test_upload_with_byte_order_mark(self):
        """Should read uploaded files saved with a byte order mark."""
        response = self.client.post(
            "/api/upload",
            files=[
                ("files", ("requirements.txt", "\ufeffplaywright==1.55.0\npytest\n".encode("utf-8"), "text/plain")),
            ],
        )

        assert response.status_code == 200
        assert response.json()["configuration"]["base_image"] == "mcr.microsoft.com/playwright/python:v1.55.0-jammy"
