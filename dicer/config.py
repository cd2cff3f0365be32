from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: str = "local"
    # Forced off when environment is "production".
    debug: bool = False
    log_level: str = "WARNING"

    # Command-line roller defaults; -v / -q override per invocation.
    verbosity: Literal["quiet", "default", "verbose"] = "default"
    # Fixed seed for reproducible rolls. Leave unset to seed from OS entropy.
    seed: int | None = None
    # Interactive lines longer than this are truncated before rolling.
    max_command_length: int = 1024

    # Each HTTP request may draw at most this many dice, so a threshold like
    # 1d6b6 fails fast instead of spinning forever.
    api_max_draws: int = 10_000

    @property
    def debug_enabled(self) -> bool:
        return self.debug and self.environment != "production"


settings = Settings()
