"""
metadata.py — Typed calls against the YouTube Data API v3.

Transcripts come from scraping, but everything else (duration, comments,
snippet/statistics metadata) comes from the official API through
google-api-python-client.  The client object (`service`) is built once by
the engine and passed in, so this module never constructs one itself.

The main entry point is MetadataClient with grab_duration(),
grab_comments() and grab_metadata().
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from googleapiclient.errors import HttpError

from yt_content_extractor.config import COMMENTS_MAX_RESULTS
from yt_content_extractor.errors import (
    FetchError,
    InvalidDurationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# ISO-8601 durations as the API reports them ("PT1H2M3S").  Every group is
# optional, so "PT" alone is a valid zero-length duration.
_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?", re.IGNORECASE)

# Prefix for reply lines in the flattened comment list.
REPLY_INDENT = "    - "


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VideoMetadata:
    """
    Snapshot of a video's snippet and statistics at fetch time.

    Attributes mirror the API's snippet/statistics fields; counts are ints
    (the API sends them as strings) and default to 0 when hidden.
    """
    id: str
    title: str
    description: str
    published_at: str
    channel_id: str
    channel_title: str
    category_id: str
    tags: list[str] = field(default_factory=list)
    view_count: int = 0
    like_count: int = 0

    def to_dict(self) -> dict:
        """JSON shape used by the CLI and REST layer (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "publishedAt": self.published_at,
            "channelId": self.channel_id,
            "channelTitle": self.channel_title,
            "categoryId": self.category_id,
            "tags": list(self.tags),
            "viewCount": self.view_count,
            "likeCount": self.like_count,
        }


# ---------------------------------------------------------------------------
# Duration parsing
# ---------------------------------------------------------------------------

def parse_duration_minutes(duration: str) -> int:
    """
    Convert an ISO-8601 duration into whole minutes.

    Seconds are truncated, not rounded: "PT1H2M3S" → 62, "PT15S" → 0,
    "PT" → 0.

    Raises:
        InvalidDurationError: If the string contains no "PT" structure.
    """
    match = _DURATION_PATTERN.search(duration)
    if match is None:
        raise InvalidDurationError(duration)

    hours, minutes, seconds = (int(group) if group else 0 for group in match.groups())
    return hours * 60 + minutes + seconds // 60


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

class MetadataClient:
    """
    Duration, comment and metadata lookups for single videos.

    Args:
        service: A built `youtube` v3 resource from googleapiclient.
    """

    def __init__(self, service) -> None:
        self._service = service

    def _execute(self, request, video_id: str, what: str) -> dict:
        logger.debug("Data API %s for video %s", what, video_id)
        try:
            return request.execute()
        except HttpError as exc:
            raise FetchError(f"{what} for video {video_id}", str(exc)) from exc

    def grab_duration(self, video_id: str) -> int:
        """
        Fetch a video's length in whole minutes.

        Raises:
            FetchError:           The API call failed.
            NotFoundError:        No video with that id.
            InvalidDurationError: The reported duration is unparseable.
        """
        response = self._execute(
            self._service.videos().list(part="contentDetails", id=video_id),
            video_id,
            "video details",
        )
        items = response.get("items", [])
        if not items:
            raise NotFoundError(video_id)

        duration = items[0].get("contentDetails", {}).get("duration", "")
        return parse_duration_minutes(duration)

    def grab_comments(self, video_id: str) -> list[str]:
        """
        Fetch up to 100 top-level comment threads as a flat list.

        Each top-level comment is followed directly by its replies, and each
        reply is prefixed with REPLY_INDENT.  Only the first page is read.
        """
        response = self._execute(
            self._service.commentThreads().list(
                part="snippet,replies",
                videoId=video_id,
                textFormat="plainText",
                maxResults=COMMENTS_MAX_RESULTS,
            ),
            video_id,
            "comments",
        )

        comments: list[str] = []
        for item in response.get("items", []):
            top_level = item["snippet"]["topLevelComment"]["snippet"]["textDisplay"]
            comments.append(top_level)
            for reply in item.get("replies", {}).get("comments", []):
                comments.append(REPLY_INDENT + reply["snippet"]["textDisplay"])
        return comments

    def grab_metadata(self, video_id: str) -> VideoMetadata:
        """
        Fetch snippet and statistics for a video.

        Raises:
            FetchError:    The API call failed.
            NotFoundError: No video with that id.
        """
        response = self._execute(
            self._service.videos().list(part="snippet,statistics", id=video_id),
            video_id,
            "video metadata",
        )
        items = response.get("items", [])
        if not items:
            raise NotFoundError(video_id)

        video = items[0]
        snippet = video.get("snippet", {})
        statistics = video.get("statistics", {})
        return VideoMetadata(
            id=video.get("id", video_id),
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            published_at=snippet.get("publishedAt", ""),
            channel_id=snippet.get("channelId", ""),
            channel_title=snippet.get("channelTitle", ""),
            category_id=snippet.get("categoryId", ""),
            tags=list(snippet.get("tags", [])),
            view_count=int(statistics.get("viewCount", 0)),
            like_count=int(statistics.get("likeCount", 0)),
        )
