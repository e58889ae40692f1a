"""AIMIX global configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    env: str = "development"
    cors_origins: list[str] = ["*"]

    # Paths
    samples_dir: Path = Path("./downloads")
    model_path: Path = Path("./AImix_model.onnx")

    # Model
    onnx_providers: list[str] = ["CPUExecutionProvider"]
    sample_extensions: list[str] = [".wav"]
    max_tracks: int = 8
    window_length: int = 485052  # samples per channel

    # Jobs
    job_timeout_seconds: float = 300.0

    model_config = {
        "env_prefix": "AIMIX_",
        "env_file": ".env",
        "extra": "ignore",
        "protected_namespaces": ("settings_",),
    }


settings = Settings()
