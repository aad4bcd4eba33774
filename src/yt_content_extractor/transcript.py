"""
transcript.py — Scrape caption tracks from the YouTube watch page.

There is no stable public API for transcripts, so this module walks the same
path a browser does:

    1. Fetch the watch page HTML         → TranscriptFetcher.fetch_watch_page()
    2. Find the script holding captions  → find_caption_tracks()
    3. Cut the JSON array out of it      → extract_json_array()
    4. Decode it into CaptionTrack items → parse_caption_tracks()
    5. Pick a track for the language     → select_caption_track()
    6. Fetch the caption XML document    → TranscriptFetcher.fetch_caption_document()
    7. Parse and format the segments     → parse_caption_document(),
                                           format_plain(), format_timestamped()

Each stage raises its own error (FetchError, ParseError, NoCaptionsError).
The public grab_* methods wrap any of them in TranscriptUnavailableError.
"""

from __future__ import annotations

import json
import logging
import math
import warnings
from dataclasses import dataclass
from typing import Callable, Iterable
from urllib.parse import parse_qs, urlparse

import requests
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from yt_content_extractor.config import (
    BROWSER_HEADERS,
    REQUEST_TIMEOUT_SECS,
    WATCH_URL,
)
from yt_content_extractor.errors import (
    ExtractionError,
    FetchError,
    NoCaptionsError,
    ParseError,
    TranscriptUnavailableError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Substring that identifies the script element carrying the caption manifest,
# and the JSON key whose array value we want.
CAPTION_MARKER = "captionTracks"
_CAPTION_KEY = '"captionTracks":'

# YouTube double-escapes apostrophes in caption text, so after the markup
# parser has decoded "&amp;" this literal entity is still left behind.
_APOSTROPHE_ENTITY = "&#39;"

# Signature of the pluggable "find the JSON array after a marker" step.
ArrayExtractor = Callable[[str, str], "str | None"]


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionTrack:
    """One per-language caption resource listed on the watch page."""
    base_url: str

    @property
    def language(self) -> str:
        """The `lang` query parameter of base_url, or "" if absent."""
        params = parse_qs(urlparse(self.base_url).query)
        values = params.get("lang")
        return values[0] if values else ""


@dataclass(frozen=True)
class TranscriptSegment:
    """A single caption node: start offset, duration and text."""
    start: float
    duration: float
    text: str

    @property
    def end(self) -> float:
        return self.start + self.duration


# ---------------------------------------------------------------------------
# Watch page parsing
# ---------------------------------------------------------------------------

def extract_json_array(text: str, key: str) -> str | None:
    """
    Return the first complete JSON array that follows `key` in `text`.

    Walks forward from the first "[" after the key and tracks bracket depth,
    skipping over string literals (and escaped quotes inside them), so nested
    arrays and "]" characters inside strings don't end the match early.

    Args:
        text: An arbitrarily large blob, typically a script element's text.
        key:  The marker preceding the array, e.g. '"captionTracks":'.

    Returns:
        The array source text including its brackets, or None if the key is
        missing or the array never closes.
    """
    index = text.find(key)
    if index == -1:
        return None
    start = text.find("[", index + len(key))
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def find_caption_tracks(
    html: str,
    video_id: str,
    array_extractor: ArrayExtractor = extract_json_array,
) -> str:
    """
    Locate the caption-track JSON array inside a watch page.

    Raises:
        ParseError: If no script mentions captionTracks, or none of those
                    scripts yields an array after the marker.
    """
    soup = BeautifulSoup(html, "html.parser")
    marker_seen = False
    for script in soup.find_all("script"):
        script_text = script.string or ""
        if CAPTION_MARKER not in script_text:
            continue
        marker_seen = True
        fragment = array_extractor(script_text, _CAPTION_KEY)
        if fragment is not None:
            return fragment

    if marker_seen:
        raise ParseError(video_id, "no caption track JSON found after marker")
    raise ParseError(video_id, "transcript not found in watch page HTML")


def parse_caption_tracks(fragment: str, video_id: str) -> list[CaptionTrack]:
    """
    Decode the caption-track JSON array.  Only `baseUrl` is read.

    Raises:
        ParseError:      If the fragment isn't a JSON array of objects.
        NoCaptionsError: If the array is empty.
    """
    try:
        data = json.loads(fragment)
    except json.JSONDecodeError as exc:
        raise ParseError(video_id, f"error decoding captionTracks: {exc}") from exc

    if not isinstance(data, list):
        raise ParseError(video_id, "captionTracks is not a JSON array")

    tracks = [
        CaptionTrack(base_url=item.get("baseUrl", ""))
        for item in data
        if isinstance(item, dict)
    ]
    if not tracks:
        raise NoCaptionsError(video_id)
    return tracks


def select_caption_track(tracks: list[CaptionTrack], language: str) -> CaptionTrack:
    """
    Pick the track whose `lang` parameter equals `language` exactly.

    Falls back to the first track (with a warning) rather than failing, so a
    video with only Spanish captions still yields a transcript when English
    was requested.  `tracks` must be non-empty.
    """
    for track in tracks:
        if track.language == language:
            return track

    fallback = tracks[0]
    logger.warning(
        "No exact language match for %r, falling back to first available: %s",
        language,
        fallback.base_url,
    )
    return fallback


# ---------------------------------------------------------------------------
# Caption document parsing
# ---------------------------------------------------------------------------

def _parse_seconds(value: str | None) -> float:
    """
    Read a timing attribute as seconds.

    Missing, non-numeric, negative and non-finite values all become 0.0.
    Bad timing on one caption node should never cost the whole transcript.
    """
    if value is None:
        return 0.0
    try:
        seconds = float(value)
    except ValueError:
        return 0.0
    return seconds if math.isfinite(seconds) and seconds >= 0 else 0.0


def _clean_text(text: str) -> str:
    return text.replace(_APOSTROPHE_ENTITY, "'")


def parse_caption_document(document: str) -> list[TranscriptSegment]:
    """
    Parse a timedtext XML document into segments.

    Each <text start="…" dur="…"> node becomes one TranscriptSegment, in
    document order.
    """
    # html.parser avoids an lxml dependency; it reads timedtext XML fine.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(document, "html.parser")
    return [
        TranscriptSegment(
            start=_parse_seconds(node.get("start")),
            duration=_parse_seconds(node.get("dur")),
            text=_clean_text(node.get_text()),
        )
        for node in soup.find_all("text")
    ]


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_timestamp(seconds: float) -> str:
    """
    Convert seconds to HH:MM:SS, truncating any fraction.

    Examples: 0 → "00:00:00", 3661 → "01:01:01", 61.9 → "00:01:01".
    """
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_plain(segments: Iterable[TranscriptSegment]) -> str:
    """Join segment text with single spaces."""
    return " ".join(segment.text for segment in segments)


def format_timestamped(segments: Iterable[TranscriptSegment]) -> str:
    """One "[start - end] text" line per segment, each newline-terminated."""
    return "".join(
        f"[{format_timestamp(segment.start)} - {format_timestamp(segment.end)}] {segment.text}\n"
        for segment in segments
    )


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class TranscriptFetcher:
    """
    Runs the watch page → caption document pipeline for one video at a time.

    Holds no per-request state, so one instance can serve concurrent callers
    as long as the injected session is safe to share.  By default requests'
    module-level get() is used, which opens a fresh connection per call.

    Args:
        session:         Anything with a requests-style get(); defaults to
                         the requests module.
        timeout:         Per-request timeout in seconds.
        array_extractor: Replaces extract_json_array() for locating the
                         caption JSON inside a script.
    """

    def __init__(
        self,
        session=None,
        timeout: float = REQUEST_TIMEOUT_SECS,
        array_extractor: ArrayExtractor = extract_json_array,
    ) -> None:
        self._http = session if session is not None else requests
        self._timeout = timeout
        self._array_extractor = array_extractor

    def _get(self, url: str, target: str) -> str:
        logger.debug("GET %s", url)
        try:
            response = self._http.get(url, headers=BROWSER_HEADERS, timeout=self._timeout)
        except requests.RequestException as exc:
            raise FetchError(target, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            raise FetchError(target, f"status code {response.status_code}")
        return response.text

    def fetch_watch_page(self, video_id: str) -> str:
        return self._get(WATCH_URL.format(video_id=video_id), f"YouTube page for video {video_id}")

    def fetch_caption_tracks(self, video_id: str) -> list[CaptionTrack]:
        """Stages 1–4: watch page down to the decoded caption track list."""
        html = self.fetch_watch_page(video_id)
        fragment = find_caption_tracks(html, video_id, self._array_extractor)
        return parse_caption_tracks(fragment, video_id)

    def fetch_caption_document(self, video_id: str, language: str) -> str:
        """
        Run every stage and return the raw caption XML.

        Raises:
            FetchError, ParseError, NoCaptionsError: from the failing stage.
        """
        tracks = self.fetch_caption_tracks(video_id)
        track = select_caption_track(tracks, language)
        return self._get(track.base_url, f"transcript for video {video_id}")

    def grab_transcript_segments(self, video_id: str, language: str) -> list[TranscriptSegment]:
        """
        Fetch and parse the caption document into segments.

        Raises:
            TranscriptUnavailableError: On any stage failure (chained).
        """
        try:
            document = self.fetch_caption_document(video_id, language)
        except ExtractionError as exc:
            raise TranscriptUnavailableError(video_id, exc.message) from exc
        return parse_caption_document(document)

    def grab_transcript(self, video_id: str, language: str) -> str:
        """Plain transcript: caption text joined by single spaces."""
        return format_plain(self.grab_transcript_segments(video_id, language))

    def grab_transcript_with_timestamps(self, video_id: str, language: str) -> str:
        """Transcript with one "[HH:MM:SS - HH:MM:SS] text" line per caption."""
        return format_timestamped(self.grab_transcript_segments(video_id, language))
