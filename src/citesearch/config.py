from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

class Settings(BaseSettings):
    GROQ_API_KEY: Optional[str] = Field(None, description="API key for the OpenAI-compatible completion endpoint")
    LLM_BASE_URL: str = Field("https://api.groq.com/openai/v1", description="OpenAI-compatible completion endpoint")
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    LLM_MAX_TOKENS: int = 2500
    LLM_TEMPERATURE: float = 0.2
    LLM_TOP_P: float = 0.9
    LLM_TIMEOUT_SECONDS: float = 60.0
    LOG_LEVEL: str = "INFO"

    # Search mirrors
    BACKENDS_FILE: str = Field("data/backends.yaml", description="YAML registry of SearxNG mirrors")
    SEARXNG_ENGINES: str = "google,bing,duckduckgo"
    FETCH_TIMEOUT_SECONDS: float = Field(8.0, description="Per-mirror request bound")
    SPECIALIZED_TIMEOUT_SECONDS: float = Field(6.0, description="Per-request bound for specialized sources")
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Specialized sources (items kept from each)
    WIKIPEDIA_LIMIT: int = 2
    GITHUB_LIMIT: int = 2
    NEWS_LIMIT: int = 2
    BOOKS_LIMIT: int = 1

    # Merging
    MIN_CONTENT_CHARS: int = Field(50, description="Web snippets at or below this length are dropped")
    SNIPPET_CHARS: int = 200
    MAX_SOURCES: int = 10
    MAX_IMAGES: int = 6
    MAX_VIDEOS: int = 4

    # Requests
    MIN_QUERY_CHARS: int = 2
    MAX_QUERY_CHARS: int = 500
    MAX_HISTORY_TURNS: int = 6

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()

def load_backend_file(path: Optional[str] = None) -> Dict[str, Any]:
    path = Path(path or get_settings().BACKENDS_FILE)
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}
