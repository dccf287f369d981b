"""
Configuration management for the family support platform.
"""
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

# Find the project root (where .env file lives)
# Go up from src/utils/config.py to find the root
_THIS_FILE = Path(__file__).resolve()
_PROJECT_ROOT = _THIS_FILE.parent.parent.parent  # src/utils -> src -> project root
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Optional API Keys (assessments work without any of them)
    anthropic_api_key: Optional[str] = None
    pubmed_api_key: Optional[str] = None

    # NCBI asks for a contact address on every E-utilities request
    pubmed_email: str = "noreply@example.com"

    # Secondary bibliographic source
    doaj_base_url: str = "https://doaj.org/api/v2"

    # Claude Configuration
    claude_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1500
    temperature: float = 0.7

    # Research aggregation
    adapter_timeout_seconds: float = 15.0
    http_timeout_seconds: int = 30
    max_sources: int = 6
    primary_results_per_query: int = 2
    secondary_max_results: int = 3
    static_max_results: int = 4

    # Article store
    seed_sample_articles: bool = True

    # Weekly article generation
    article_topics_per_run: int = 3
    article_archive_count: int = 3
    article_max_tokens: int = 2000
    cron_secret: Optional[str] = None  # Bearer token required by the generate endpoint when set

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def has_llm(self) -> bool:
        """Check if answer generation is available"""
        return bool(self.anthropic_api_key)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings instance loaded from environment
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """
    Force reload settings from environment.

    Returns:
        New Settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
