from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from postlint.schemas.validation import ErrorKind


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content tree
    CONTENT_DIR: str = "content"
    AUTHORS_DIR: str = "authors"
    CONTENT_EXTENSIONS: List[str] = [".md"]
    SECTION_INDEX_NAME: str = "_index.md"

    # Scanning
    SCAN_WORKERS: int = 1
    INCLUDE_DRAFTS: bool = False
    WORDS_PER_MINUTE: int = 200

    # Build policy: error kinds that fail the build
    FAIL_ON: List[ErrorKind] = list(ErrorKind)

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def content_path(self) -> Path:
        return Path(self.CONTENT_DIR)

    @property
    def authors_path(self) -> Path:
        return Path(self.AUTHORS_DIR)


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
