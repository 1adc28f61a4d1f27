from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repo root: frameloom/..
ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = ROOT / ".env"


class Settings(BaseSettings):
    # Logical canvas every layer renders into
    canvas_width: int = 1920
    canvas_height: int = 1080
    fps: int = 30

    # Default horizon line (reference 1080-line space)
    horizon_y: float = 540.0

    log_level: str = "INFO"

    # Raise at load time if the sky/mood tables disagree instead of only warning
    strict_mood_tables: bool = False

    scatter_cache_size: int = 256

    model_config = SettingsConfigDict(env_file=str(ENV_PATH), env_prefix="FRAMELOOM_", extra="ignore")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.canvas_width = max(1, int(self.canvas_width))
        self.canvas_height = max(1, int(self.canvas_height))


settings = Settings()
