"""
errors.py — Custom exception hierarchy for yt-content-extractor.

Every exception carries an `http_status` attribute so the FastAPI error
handler can translate library-level errors directly into the correct HTTP
response code without a separate mapping table.

Hierarchy:
    ExtractionError (base, 500)
    ├── InvalidURLError (400)
    ├── PlaylistNotVideoError (400)
    ├── FetchError (502)
    ├── ParseError (502)
    ├── NoCaptionsError (404)
    ├── TranscriptUnavailableError (404)
    ├── InvalidDurationError (502)
    ├── NotFoundError (404)
    ├── ExportError (500)
    └── ConfigurationError (500)
"""


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class ExtractionError(Exception):
    """
    Root exception for all extraction errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


# ---------------------------------------------------------------------------
# Identifier resolution
# ---------------------------------------------------------------------------

class InvalidURLError(ExtractionError):
    """Raised when neither a video nor a playlist id can be found in a URL."""

    def __init__(self, url: str) -> None:
        super().__init__(
            message=f"Invalid YouTube URL, can't get video or playlist ID: {url!r}",
            http_status=400,
        )
        self.url = url


class PlaylistNotVideoError(ExtractionError):
    """
    Raised when a video-level operation receives a playlist-only URL.

    A URL carrying both ids is always treated as a video; this only fires
    when there is no video id at all.
    """

    def __init__(self, playlist_id: str) -> None:
        super().__init__(
            message=f"URL is a playlist, not a video: {playlist_id}",
            http_status=400,
        )
        self.playlist_id = playlist_id


# ---------------------------------------------------------------------------
# Upstream fetching and parsing
# ---------------------------------------------------------------------------

class FetchError(ExtractionError):
    """
    Raised on a transport error or a non-2xx response from YouTube.

    Maps to HTTP 502 because the failure is upstream.
    """

    def __init__(self, target: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            message=f"Error fetching {target}{detail}",
            http_status=502,
        )
        self.target = target


class ParseError(ExtractionError):
    """Raised when an expected marker or JSON fragment is missing or malformed."""

    def __init__(self, video_id: str, reason: str) -> None:
        super().__init__(
            message=f"Could not parse watch page for video {video_id}: {reason}",
            http_status=502,
        )
        self.video_id = video_id


class NoCaptionsError(ExtractionError):
    """Raised when the watch page lists an empty set of caption tracks."""

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"No caption tracks listed for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class TranscriptUnavailableError(ExtractionError):
    """
    Raised by the transcript operations when any stage of the scrape fails.

    The stage error is always chained as ``__cause__``.
    """

    def __init__(self, video_id: str, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(
            message=f"Transcript not available for video {video_id}{detail}",
            http_status=404,
        )
        self.video_id = video_id


class InvalidDurationError(ExtractionError):
    """Raised when a duration string has no recognisable ISO-8601 structure."""

    def __init__(self, duration: str) -> None:
        super().__init__(
            message=f"Invalid duration string: {duration!r}",
            http_status=502,
        )
        self.duration = duration


class NotFoundError(ExtractionError):
    """Raised when the Data API returns zero items for a video id."""

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"No video found with ID: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


# ---------------------------------------------------------------------------
# Local failures
# ---------------------------------------------------------------------------

class ExportError(ExtractionError):
    """Raised when the playlist CSV file can't be created or written."""

    def __init__(self, filename: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            message=f"Error saving videos to CSV file {filename}{detail}",
            http_status=500,
        )
        self.filename = filename


class ConfigurationError(ExtractionError):
    """Raised when a Data API call is attempted without an API key."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message=message,
            http_status=500,
        )
