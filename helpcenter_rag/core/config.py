"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_OPT: str | None = None
SEVEN_DAYS_IN_SECONDS = 604800

HELP_CENTER_BASE_URL = "https://napoveda.medevio.cz"

# Help-center folder (index) pages. Only the confirmed folder is known to exist; the
# others follow its numbering and are unverified. Override with INDEX_URLS='["...", ...]'.
CONFIRMED_FOLDER_IDS = ("204000127921",)
DEFAULT_INDEX_URLS: List[str] = [
    f"{HELP_CENTER_BASE_URL}/support/solutions/folders/{folder_id}"
    for folder_id in (
        "204000127921",
        "204000127922",
        "204000127923",
        "204000127924",
        "204000127925",
        "204000127926",
        "204000127927",
        "204000127928",
        "204000127929",
        "204000127930",
        "204000127931",
        "204000127932",
        "204000127933",
        "204000127934",
    )
]

# Only load .env if it exists (for local development)
_env_path = Path(".env")
if _env_path.exists():
    load_dotenv(dotenv_path=_env_path)
    ENV_FILE_OPT = str(_env_path)


class Settings(BaseSettings):
    """Application configuration.

    Loads settings from environment variables. In local development, these can be
    provided via a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE_OPT,
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    # Application
    log_level: str = Field(default="INFO", description="Logging level")

    # Redis
    redis_url: SecretStr = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    redis_password: Optional[SecretStr] = Field(default=None, description="Redis password")

    # OpenAI (optional at import time so the scraper can run without secrets)
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")

    # Vector Search
    embedding_model: str = Field(
        default="text-embedding-3-small", description="OpenAI embedding model"
    )
    vector_dim: int = Field(default=1536, description="Vector dimensions")
    docs_index_name: str = Field(
        default="helpcenter_docs", description="Name of the documentation vector index"
    )
    embeddings_cache_ttl: int = Field(
        default=SEVEN_DAYS_IN_SECONDS, description="TTL for cached embeddings (seconds)"
    )

    # Scraper
    output_dir: Path = Field(
        default=Path("output") / "docs", description="Directory for scraped Markdown articles"
    )
    index_urls: List[str] = Field(
        default_factory=lambda: list(DEFAULT_INDEX_URLS),
        description=(
            "Help-center index pages scraped by the full pipeline; defaults other than "
            "CONFIRMED_FOLDER_IDS are guessed and should be verified"
        ),
    )
    article_link_selector: str = Field(
        default="a.row", description="CSS selector for article anchors on an index page"
    )
    article_title_selector: str = Field(
        default=".col-md-8 .line-clamp-2",
        description="CSS selector (relative to the anchor) for the article title",
    )
    article_href_pattern: str = Field(
        default="/support/solutions/articles/",
        description="Substring an href must contain to count as an article link",
    )
    content_selector: str = Field(
        default=".fw-content.fw-content--single-article",
        description="CSS selector for the main content container of an article page",
    )
    index_page_concurrency: int = Field(
        default=2, description="Maximum index pages processed concurrently"
    )
    article_delay_seconds: float = Field(
        default=0.5, description="Pause between sequential article fetches within a page"
    )
    http_timeout: float = Field(default=30.0, description="HTTP timeout for page fetches")

    # Ingestion
    embed_batch_size: int = Field(default=10, description="Chunks per embedding request")
    max_chunk_chars: int = Field(
        default=4000,
        description="Sections longer than this are split further at paragraph boundaries",
    )


# Global settings instance
settings = Settings()
