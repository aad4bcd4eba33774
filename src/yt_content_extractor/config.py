"""
config.py — Shared constants and engine configuration.

Everything tunable lives here so the scraping, API and playlist modules agree
on timeouts, headers and pacing.  ExtractorConfig.from_env() is the single
place environment variables are read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Environment variables consulted by ExtractorConfig.from_env().
API_KEY_ENV = "YOUTUBE_API_KEY"
LANGUAGE_ENV = "YOUTUBE_TRANSCRIPT_LANGUAGE"

DEFAULT_LANGUAGE = "en"

# Watch-page and caption-document requests.  YouTube serves different markup
# (without captionTracks) to clients that don't look like a desktop browser.
REQUEST_TIMEOUT_SECS = 10
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

# Data API page sizes and the pause between playlist pages.
COMMENTS_MAX_RESULTS = 100
PLAYLIST_PAGE_SIZE = 50
PLAYLIST_PACING_SECS = 1.0


# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractorConfig:
    """
    Settings for a YouTubeExtractor instance.

    Attributes:
        api_key:          YouTube Data API v3 key.  None disables the typed
                          API calls (duration, comments, metadata, playlists)
                          but transcript scraping still works.
        language:         Default caption language for the aggregators.
        request_timeout:  Timeout in seconds for page and caption requests.
        pacing_interval:  Pause in seconds between playlist pages.
    """
    api_key: str | None = None
    language: str = DEFAULT_LANGUAGE
    request_timeout: float = REQUEST_TIMEOUT_SECS
    pacing_interval: float = PLAYLIST_PACING_SECS

    @classmethod
    def from_env(cls) -> ExtractorConfig:
        """Build a config from YOUTUBE_API_KEY / YOUTUBE_TRANSCRIPT_LANGUAGE."""
        return cls(
            api_key=os.environ.get(API_KEY_ENV) or None,
            language=os.environ.get(LANGUAGE_ENV) or DEFAULT_LANGUAGE,
        )
