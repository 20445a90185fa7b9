"""HTTP-backed providers for the pipeline stages."""

from pathlib import Path
from typing import Optional

from ..config import HttpConfig
from ..timeline.models import (
    AnimationTimeline,
    BeatAnalysisResult,
    ImageAsset,
    LogoAsset,
    MusicAsset,
    ScriptEnhancementResult,
    UploadFile,
    VideoAsset,
)
from .base import (
    BeatAnalysisProvider,
    ScriptEnhancementProvider,
    SynthesisRequest,
    TimelineSynthesisProvider,
    UploadedAsset,
    UploadProvider,
)
from .client import ProviderClient


_ASSET_TYPES = {
    "logo": LogoAsset,
    "music": MusicAsset,
    "productImages": ImageAsset,
    "productVideos": VideoAsset,
}


class HttpUploadProvider(UploadProvider):
    """Uploads files one by one as multipart form data."""

    name = "http-upload"

    def __init__(self, client: ProviderClient, path: str = "/api/upload"):
        self.client = client
        self.path = path

    def upload_file(self, file: UploadFile, index: int) -> UploadedAsset:
        content = Path(file.path).read_bytes() if file.path else b""
        data = self.client.request(
            "POST",
            self.path,
            files={file.kind: (file.filename, content, file.content_type)},
            data={"index": str(index)},
        )
        # The service may answer with the full asset map or the single asset.
        if isinstance(data, dict) and file.kind == "music" and "musicFile" in data:
            data = data["musicFile"]
        elif isinstance(data, dict) and file.kind in data and isinstance(data[file.kind], dict):
            data = data[file.kind]
        return _ASSET_TYPES[file.kind].model_validate(data)


class HttpBeatAnalysisProvider(BeatAnalysisProvider):
    name = "http-beat-analysis"

    def __init__(self, client: ProviderClient, path: str = "/api/beat-analysis"):
        self.client = client
        self.path = path

    def analyze(self, music_url: str, fps: int = 30) -> BeatAnalysisResult:
        data = self.client.post_json(self.path, {"musicFileUrl": music_url, "fps": fps})
        return BeatAnalysisResult.model_validate(data)


class HttpScriptEnhancementProvider(ScriptEnhancementProvider):
    name = "http-script-enhancement"

    def __init__(self, client: ProviderClient, path: str = "/api/script-enhancement"):
        self.client = client
        self.path = path

    def enhance(self, script: str, style_prompt: str) -> ScriptEnhancementResult:
        data = self.client.post_json(
            self.path,
            {"originalScript": script, "stylePrompt": style_prompt},
        )
        return ScriptEnhancementResult.model_validate(data)


class HttpTimelineSynthesisProvider(TimelineSynthesisProvider):
    """Asks a remote service (usually language-model backed) for a timeline."""

    name = "http-timeline-synthesis"

    def __init__(self, client: ProviderClient, path: str = "/api/generate-timeline"):
        self.client = client
        self.path = path

    def synthesize(self, request: SynthesisRequest) -> AnimationTimeline:
        payload = {
            "enhancedScript": request.enhancement.enhanced_script,
            "originalScript": request.enhancement.original_script,
            "stylePrompt": request.style_prompt,
            "beatAnalysis": request.beat_analysis.to_dict(),
            "uploadedAssets": request.assets.to_dict(),
            "videoWidth": request.width,
            "videoHeight": request.height,
            "fps": request.fps,
            "projectName": request.project_name,
        }
        data = self.client.post_json(self.path, payload, timeout_class="long")
        timeline = AnimationTimeline.model_validate(data)
        return timeline.with_derived_total()


def make_client(url: str, http: HttpConfig, api_key: Optional[str] = None) -> ProviderClient:
    return ProviderClient(url, http=http, api_key=api_key)
