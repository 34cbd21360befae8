"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings."""

    # Persistence
    STORAGE_DIR: Path = Path.home() / ".holocard"
    STORAGE_KEY: str = "shinecard-editor-v2"
    AUTOSAVE: bool = True  # Write the document after every mutation

    # Undo / redo
    HISTORY_LIMIT: int = 50  # Max entries per stack
    HISTORY_COALESCE_SECONDS: float = 0.0  # 0 disables time-based coalescing

    model_config = {"env_prefix": "HOLOCARD_"}


settings = Settings()
