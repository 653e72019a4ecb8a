"""Centralised settings for the site cloner.

API keys, upstream timeouts and the log level come from the environment.
A `.env` file next to the package is read on import; variables already set
in the process win over it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Scraping API (primary source)
    # ------------------------------------------------------------------
    firecrawl_api_key: str = field(
        default_factory=lambda: os.environ.get("FIRECRAWL_API_KEY", "")
    )
    firecrawl_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "FIRECRAWL_BASE_URL", "https://api.firecrawl.dev"
        )
    )
    scrape_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SCRAPE_TIMEOUT", "45.0"))
    )
    scrape_wait_for_ms: int = field(
        default_factory=lambda: int(os.environ.get("SCRAPE_WAIT_FOR_MS", "3000"))
    )

    # ------------------------------------------------------------------
    # Direct-fetch fallback
    # ------------------------------------------------------------------
    fallback_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FALLBACK_TIMEOUT", "15.0"))
    )
    fallback_max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("FALLBACK_MAX_REDIRECTS", "5"))
    )

    # ------------------------------------------------------------------
    # Realtime voice sessions
    # ------------------------------------------------------------------
    azure_openai_api_key: str = field(
        default_factory=lambda: os.environ.get("AZURE_OPENAI_API_KEY", "")
    )
    azure_openai_endpoint: str = field(
        default_factory=lambda: os.environ.get("AZURE_OPENAI_ENDPOINT", "")
    )
    azure_openai_deployment: str = field(
        default_factory=lambda: os.environ.get("AZURE_OPENAI_DEPLOYMENT", "")
    )
    azure_openai_api_version: str = field(
        default_factory=lambda: os.environ.get(
            "AZURE_OPENAI_API_VERSION", "2025-04-01-preview"
        )
    )
    realtime_webrtc_url: str = field(
        default_factory=lambda: os.environ.get(
            "AZURE_REALTIME_WEBRTC_URL",
            "https://swedencentral.realtimeapi-preview.ai.azure.com/v1/realtimertc",
        )
    )
    voice_timeout: float = field(
        default_factory=lambda: float(os.environ.get("VOICE_TIMEOUT", "20.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    @property
    def voice_configured(self) -> bool:
        """``True`` when every Azure setting needed for voice sessions is set."""
        return bool(
            self.azure_openai_api_key
            and self.azure_openai_endpoint
            and self.azure_openai_deployment
        )


# Module-level singleton, imported everywhere:
#   from sitecloner.config import settings
settings = Settings()
