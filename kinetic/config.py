"""Configuration loading and management."""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


class VideoConfig(BaseModel):
    """Default output video configuration."""

    width: int = 1080
    height: int = 1920
    fps: int = 30
    target_frames: int = 600
    codec: str = "h264"


class ProvidersConfig(BaseModel):
    """External provider configuration.

    In ``live`` mode every stage whose URL is set talks to that service;
    stages without a URL are unconfigured and use the mock provider.
    """

    mode: Literal["mock", "live"] = "mock"
    upload_url: str | None = None
    beat_analysis_url: str | None = None
    script_enhancement_url: str | None = None
    timeline_synthesis_url: str | None = None
    render_url: str | None = None
    api_key: str | None = None


class HttpConfig(BaseModel):
    """HTTP client timeouts and retry policy."""

    standard_timeout: float = 30.0
    long_timeout: float = 300.0
    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    retry_on_timeout: bool = False


class RenderConfig(BaseModel):
    """Look-and-feel defaults applied at evaluation time."""

    style_mode: Literal["premium", "bold", "minimal"] = "premium"
    primary_color: str = "#3b82f6"
    background_color: str = "#0a0a0a"
    font_family: Literal["inter", "playfair", "oswald", "bebas"] = "inter"
    enable_global_vfx: bool = True


class WebConfig(BaseModel):
    """Web server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    projects_dir: Path = Path("projects")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )


class Config(BaseModel):
    """Main application configuration."""

    video: VideoConfig = Field(default_factory=VideoConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()

        # Flatten nested resolution config
        if "video" in data and "resolution" in data["video"]:
            res = data["video"].pop("resolution")
            if isinstance(res, str):
                width, _, height = res.partition("x")
                res = {"width": int(width), "height": int(height)}
            data["video"]["width"] = res.get("width", 1080)
            data["video"]["height"] = res.get("height", 1920)

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json")
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def apply_env_overrides(self, environ: dict[str, str] | None = None) -> "Config":
        """Return a copy with KINETIC_* environment variables applied."""
        env = os.environ if environ is None else environ
        providers = self.providers.model_copy()

        mode = env.get("KINETIC_PROVIDER_MODE")
        if mode in ("mock", "live"):
            providers.mode = mode
        if env.get("KINETIC_API_KEY"):
            providers.api_key = env["KINETIC_API_KEY"]

        for stage in (
            "upload",
            "beat_analysis",
            "script_enhancement",
            "timeline_synthesis",
            "render",
        ):
            value = env.get(f"KINETIC_{stage.upper()}_URL")
            if value:
                setattr(providers, f"{stage}_url", value)

        return self.model_copy(update={"providers": providers})


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file or use defaults, then apply env overrides."""
    if config_path is None:
        # Look for config.yaml in current directory or project root
        candidates = [Path("config.yaml"), Path(__file__).parent.parent / "config.yaml"]
        for candidate in candidates:
            if candidate.exists():
                config_path = candidate
                break

    config = Config.from_yaml(config_path) if config_path is not None else Config()
    return config.apply_env_overrides()
