"""Tests for the single-stage API endpoints."""

from fastapi.testclient import TestClient


class TestBeatAnalysisAPI:
    """Tests for POST /api/v1/beat-analysis."""

    def test_analyze(self, test_client: TestClient) -> None:
        """Test beat analysis endpoint returns beats."""
        response = test_client.post(
            "/api/v1/beat-analysis",
            json={"musicFileUrl": "https://storage.example.com/music.mp3", "fps": 30},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["tempo"] == 128
        assert body["data"]["beats"][:2] == [14, 28]
        assert body["data"]["peakFrames"][0] == 14

    def test_missing_url(self, test_client: TestClient) -> None:
        """Test missing URL."""
        response = test_client.post("/api/v1/beat-analysis", json={"fps": 30})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "musicFileUrl" in error["fields"]

    def test_invalid_fps(self, test_client: TestClient) -> None:
        """Test invalid FPS."""
        response = test_client.post(
            "/api/v1/beat-analysis",
            json={"musicFileUrl": "https://storage.example.com/music.mp3", "fps": 25},
        )
        assert response.status_code == 400
        assert response.json()["error"]["stage"] == "beat_analysis"

    def test_provider_failure(self, failing_client: TestClient) -> None:
        """Test provider failure."""
        response = failing_client.post(
            "/api/v1/beat-analysis",
            json={"musicFileUrl": "https://storage.example.com/music.mp3"},
        )
        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "PROVIDER_ERROR"
        assert body["error"]["stage"] == "beat_analysis"
        assert body["error"]["provider"] == "unavailable-beats"


class TestScriptEnhancementAPI:
    """Tests for POST /api/v1/script-enhancement."""

    def test_enhance(self, test_client: TestClient, sample_script: str) -> None:
        """Test script enhancement endpoint."""
        response = test_client.post(
            "/api/v1/script-enhancement",
            json={"originalScript": sample_script, "stylePrompt": "Bold and energetic"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["enhancedScript"] == f"✨ {sample_script} ✨"
        assert data["emphasizedWords"] == ["faster", "product", "today!"]

    def test_short_script(self, test_client: TestClient) -> None:
        """Test short script."""
        response = test_client.post(
            "/api/v1/script-enhancement",
            json={"originalScript": "short", "stylePrompt": "Bold and energetic"},
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["stage"] == "script_enhancement"
        assert error["fields"]["script"] == ["Script must be at least 10 characters"]


class TestGenerateTimelineAPI:
    """Tests for POST /api/v1/generate-timeline."""

    def _payload(self, sample_script: str) -> dict:
        return {
            "enhancedScript": f"✨ {sample_script} ✨",
            "emphasizedWords": ["faster", "product"],
            "beatAnalysis": {"tempo": 120, "beats": [30, 290, 400], "peakFrames": [290]},
            "uploadedAssets": {"musicFile": {"url": "https://storage.example.com/music.mp3"}},
            "projectName": "Launch",
        }

    def test_generate(self, test_client: TestClient, sample_script: str) -> None:
        """Test timeline generation endpoint."""
        response = test_client.post("/api/v1/generate-timeline", json=self._payload(sample_script))
        assert response.status_code == 200
        timeline = response.json()["data"]
        assert timeline["projectName"] == "Launch"
        assert timeline["video"]["totalFrames"] == 600
        assert [s["durationInFrames"] for s in timeline["scenes"]] == [300, 310]
        assert timeline["audio"]["beats"] == [30, 290, 400]

    def test_music_required(self, test_client: TestClient, sample_script: str) -> None:
        """Test music required."""
        payload = self._payload(sample_script)
        payload["uploadedAssets"] = {}
        response = test_client.post("/api/v1/generate-timeline", json=payload)
        assert response.status_code == 400
        assert response.json()["error"]["stage"] == "timeline_synthesis"

    def test_peaks_must_be_beats(self, test_client: TestClient, sample_script: str) -> None:
        """Test peaks must be beats."""
        payload = self._payload(sample_script)
        payload["beatAnalysis"]["peakFrames"] = [31]
        response = test_client.post("/api/v1/generate-timeline", json=payload)
        assert response.status_code == 400


class TestHealth:
    def test_health(self, test_client: TestClient) -> None:
        """Test health check endpoint."""
        response = test_client.get("/health")
        assert response.json() == {"status": "ok", "providers": "mock"}
