"""
extractor.py — The YouTubeExtractor engine and its two aggregators.

This is the heart of yt-content-extractor.  It owns the shared resources
(the Data API client and the transcript fetcher) and exposes:

    1. Per-field operations        → grab_transcript(), grab_duration(), ...
    2. Fail-fast aggregate         → grab()
    3. Best-effort aggregate       → grab_best_effort()
    4. Playlist enumeration/export → fetch_playlist_videos(), ...

Both aggregators evaluate fields in the same fixed order and return a
VideoInfo.  They differ only in what happens after a field fails: grab()
stops, grab_best_effort() carries on.  Either way failures are recorded in
VideoInfo.errors keyed by field name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, TextIO

from googleapiclient.discovery import build

from yt_content_extractor.config import ExtractorConfig
from yt_content_extractor.errors import ConfigurationError, ExtractionError
from yt_content_extractor.identifiers import require_video_id
from yt_content_extractor.metadata import MetadataClient, VideoMetadata
from yt_content_extractor.playlist import (
    PlaylistEnumerator,
    PlaylistItem,
    fetch_and_print_playlist,
    fetch_and_save_playlist,
    save_videos_to_csv,
)
from yt_content_extractor.transcript import TranscriptFetcher, TranscriptSegment

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Request / result types
# ---------------------------------------------------------------------------

# Evaluation order shared by both aggregators.
FIELD_ORDER = (
    "metadata",
    "duration",
    "comments",
    "transcript",
    "transcript_with_timestamps",
)


@dataclass(frozen=True)
class Options:
    """Which fields to extract, plus the caption language."""
    metadata: bool = False
    duration: bool = False
    comments: bool = False
    transcript: bool = False
    transcript_with_timestamps: bool = False
    language: str = "en"

    def requested(self) -> list[str]:
        """Requested field names, in evaluation order."""
        return [name for name in FIELD_ORDER if getattr(self, name)]


@dataclass
class VideoInfo:
    """
    Aggregate result, filled in field by field.

    Fields that weren't requested, or weren't reached, keep their zero
    value.  `transcript` holds the timestamped form when that was requested
    (it is evaluated last and overwrites the plain form).
    """
    transcript: str = ""
    duration: int = 0
    comments: list[str] = field(default_factory=list)
    metadata: VideoMetadata | None = None
    errors: dict[str, ExtractionError] = field(default_factory=dict)

    @property
    def error(self) -> ExtractionError | None:
        """The first recorded error, or None."""
        return next(iter(self.errors.values()), None)

    def to_dict(self) -> dict:
        data: dict = {
            "transcript": self.transcript,
            "duration": self.duration,
            "comments": list(self.comments),
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        if self.errors:
            data["errors"] = {name: exc.message for name, exc in self.errors.items()}
        return data


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class YouTubeExtractor:
    """
    Extraction engine for one API key.

    The Data API client is built once, here, so the instance can be shared
    between threads without a lazy-initialisation race.  Pass `service` to
    inject a prebuilt (or fake) client instead.

    Args:
        config:  Engine settings; defaults to ExtractorConfig.from_env().
        service: Optional prebuilt googleapiclient `youtube` v3 resource.
        session: Optional requests-style session for scraping.
        sleep:   Optional sleep function for playlist pacing.
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        *,
        service=None,
        session=None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.config = config if config is not None else ExtractorConfig.from_env()

        if service is None and self.config.api_key:
            service = build("youtube", "v3", developerKey=self.config.api_key, cache_discovery=False)
        self._service = service

        self._transcripts = TranscriptFetcher(session=session, timeout=self.config.request_timeout)
        self._metadata = MetadataClient(service) if service is not None else None
        self._playlists = None
        if service is not None:
            pacing_kwargs = {"sleep": sleep} if sleep is not None else {}
            self._playlists = PlaylistEnumerator(
                service, pacing_interval=self.config.pacing_interval, **pacing_kwargs,
            )

    # -- shared resources ---------------------------------------------------

    def _api(self) -> MetadataClient:
        if self._metadata is None:
            raise ConfigurationError("YouTube API key is not configured")
        return self._metadata

    def _playlist_api(self) -> PlaylistEnumerator:
        if self._playlists is None:
            raise ConfigurationError("YouTube API key is not configured")
        return self._playlists

    # -- per-field operations ------------------------------------------------

    def grab_transcript(self, video_id: str, language: str | None = None) -> str:
        return self._transcripts.grab_transcript(video_id, language or self.config.language)

    def grab_transcript_with_timestamps(self, video_id: str, language: str | None = None) -> str:
        return self._transcripts.grab_transcript_with_timestamps(
            video_id, language or self.config.language,
        )

    def grab_transcript_segments(
        self, video_id: str, language: str | None = None,
    ) -> list[TranscriptSegment]:
        return self._transcripts.grab_transcript_segments(video_id, language or self.config.language)

    def grab_transcript_for_url(self, url: str, language: str | None = None) -> str:
        """Resolve a URL (video id wins) and fetch its plain transcript."""
        return self.grab_transcript(require_video_id(url), language)

    def grab_duration(self, video_id: str) -> int:
        return self._api().grab_duration(video_id)

    def grab_duration_for_url(self, url: str) -> int:
        """Resolve a URL (video id wins) and fetch its duration in minutes."""
        return self.grab_duration(require_video_id(url))

    def grab_comments(self, video_id: str) -> list[str]:
        return self._api().grab_comments(video_id)

    def grab_metadata(self, video_id: str) -> VideoMetadata:
        return self._api().grab_metadata(video_id)

    # -- aggregators -----------------------------------------------------------

    def _grab_field(self, info: VideoInfo, name: str, video_id: str, language: str) -> None:
        if name == "metadata":
            info.metadata = self.grab_metadata(video_id)
        elif name == "duration":
            info.duration = self.grab_duration(video_id)
        elif name == "comments":
            info.comments = self.grab_comments(video_id)
        elif name == "transcript":
            info.transcript = self.grab_transcript(video_id, language)
        elif name == "transcript_with_timestamps":
            info.transcript = self.grab_transcript_with_timestamps(video_id, language)

    def _aggregate(self, url: str, options: Options, stop_on_error: bool) -> VideoInfo:
        video_id = require_video_id(url)
        info = VideoInfo()

        for name in options.requested():
            try:
                self._grab_field(info, name, video_id, options.language)
            except ExtractionError as exc:
                logger.warning("Failed to get %s for video %s: %s", name, video_id, exc.message)
                info.errors[name] = exc
                if stop_on_error:
                    break
        return info

    def grab(self, url: str, options: Options) -> VideoInfo:
        """
        Fail-fast aggregate: stop at the first field that fails.

        Fields are evaluated in FIELD_ORDER.  On failure the returned
        VideoInfo holds every field populated so far plus exactly one entry
        in `errors`; later fields are never attempted.

        Raises:
            InvalidURLError:       The URL has no recognisable id.
            PlaylistNotVideoError: The URL only names a playlist.
        """
        return self._aggregate(url, options, stop_on_error=True)

    def grab_best_effort(self, url: str, options: Options) -> VideoInfo:
        """
        Best-effort aggregate: attempt every requested field.

        Same order and return type as grab(), but a failing field doesn't
        prevent the others; each failure gets its own `errors` entry.
        """
        return self._aggregate(url, options, stop_on_error=False)

    # -- playlists -------------------------------------------------------------

    def fetch_playlist_videos(self, playlist_id: str) -> list[PlaylistItem]:
        return self._playlist_api().fetch_playlist_videos(playlist_id)

    def save_videos_to_csv(self, filename: str, videos: list[PlaylistItem]) -> None:
        save_videos_to_csv(filename, videos)

    def fetch_and_save_playlist(self, playlist_id: str, filename: str) -> list[PlaylistItem]:
        return fetch_and_save_playlist(self._playlist_api(), playlist_id, filename)

    def fetch_and_print_playlist(
        self, playlist_id: str, out: TextIO | None = None,
    ) -> list[PlaylistItem]:
        return fetch_and_print_playlist(self._playlist_api(), playlist_id, out)
