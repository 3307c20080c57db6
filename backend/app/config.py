from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ADP_",
        env_file=(PROJECT_ROOT / ".env", BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # CORS
    cors_origins: list[str] = ["http://localhost:9002", "http://127.0.0.1:9002"]

    # Meta Graph API
    meta_graph_host: str = "graph.facebook.com"
    meta_graph_api_version: str = "v20.0"
    # Needed only by the resumable session upload strategy
    meta_app_id: str | None = None

    # Fallback credentials when the caller does not supply its own
    instagram_business_account_id: str | None = None
    instagram_access_token: str | None = None

    # Upload strategy for local bytes, per media kind:
    # "two_phase" | "direct_binary" (images only) | "resumable_session"
    instagram_image_upload_strategy: str = "two_phase"
    instagram_video_upload_strategy: str = "two_phase"
    instagram_video_media_type: str = "REELS"

    # Readiness polling
    instagram_publish_poll_interval_seconds: float = 5
    instagram_publish_max_polls: int = 20

    # Timeouts (seconds)
    instagram_request_timeout_seconds: float = 120
    instagram_upload_timeout_seconds: float = 1800
    # Whole-operation budget used by the HTTP API; 0 disables it
    instagram_publish_deadline_seconds: float = 15 * 60

    @property
    def meta_graph_base_url(self) -> str:
        return f"https://{self.meta_graph_host}/{self.meta_graph_api_version}"

settings = Settings()
