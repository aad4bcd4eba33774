"""
yt_content_extractor — Extract transcripts, comments, metadata and playlists
from YouTube URLs.

Public API:
    YouTubeExtractor        Engine: per-field grabs, aggregators, playlists.
    Options                 Which fields an aggregate request should extract.
    VideoInfo               Aggregate result (fields + per-field errors).
    resolve_ids()           Pull video / playlist ids out of a URL.
    format_timestamp()      Seconds → "HH:MM:SS" (truncating).
    parse_duration_minutes()  ISO-8601 duration → whole minutes.
    ExtractorConfig         API key, language, timeouts, pacing.

Exception hierarchy (all importable from this package):
    ExtractionError                Base exception for all errors.
    ├── InvalidURLError            No video or playlist id in the URL.
    ├── PlaylistNotVideoError      Video operation on a playlist-only URL.
    ├── FetchError                 Transport error or non-2xx response.
    ├── ParseError                 Caption manifest missing or malformed.
    ├── NoCaptionsError            Empty caption track list.
    ├── TranscriptUnavailableError Any transcript stage failed.
    ├── InvalidDurationError       Unparseable duration string.
    ├── NotFoundError              Data API returned no video.
    ├── ExportError                CSV file couldn't be written.
    └── ConfigurationError         No API key for a Data API call.

Usage:
    from yt_content_extractor import Options, YouTubeExtractor
    engine = YouTubeExtractor()
    info = engine.grab("https://youtu.be/dQw4w9WgXcQ", Options(transcript=True))
"""

from yt_content_extractor.config import ExtractorConfig
from yt_content_extractor.errors import (
    ConfigurationError,
    ExportError,
    ExtractionError,
    FetchError,
    InvalidDurationError,
    InvalidURLError,
    NoCaptionsError,
    NotFoundError,
    ParseError,
    PlaylistNotVideoError,
    TranscriptUnavailableError,
)
from yt_content_extractor.extractor import Options, VideoInfo, YouTubeExtractor
from yt_content_extractor.identifiers import VideoIdentifier, resolve_ids
from yt_content_extractor.metadata import VideoMetadata, parse_duration_minutes
from yt_content_extractor.playlist import PlaylistItem
from yt_content_extractor.transcript import TranscriptSegment, format_timestamp

__all__ = [
    "YouTubeExtractor",
    "Options",
    "VideoInfo",
    "ExtractorConfig",
    "VideoIdentifier",
    "resolve_ids",
    "VideoMetadata",
    "parse_duration_minutes",
    "PlaylistItem",
    "TranscriptSegment",
    "format_timestamp",
    "ExtractionError",
    "InvalidURLError",
    "PlaylistNotVideoError",
    "FetchError",
    "ParseError",
    "NoCaptionsError",
    "TranscriptUnavailableError",
    "InvalidDurationError",
    "NotFoundError",
    "ExportError",
    "ConfigurationError",
]
