"""
playlist.py — List every video in a playlist and export it to CSV.

Pages through playlistItems.list fifty items at a time, pausing between
pages to stay well inside the Data API quota.  Results keep the API's order.
"""

from __future__ import annotations

import csv
import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, TextIO

import click
from googleapiclient.errors import HttpError

from yt_content_extractor.config import PLAYLIST_PACING_SECS, PLAYLIST_PAGE_SIZE
from yt_content_extractor.errors import ExportError, FetchError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CSV_HEADER = ["VideoID", "Title"]

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]+")


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

def normalize_title(title: str) -> str:
    """Collapse every run of non-alphanumeric characters into one underscore."""
    return _NON_ALPHANUMERIC.sub("_", title)


@dataclass(frozen=True)
class PlaylistItem:
    video_id: str
    title: str
    normalized_title: str

    @classmethod
    def from_title(cls, video_id: str, title: str) -> PlaylistItem:
        return cls(video_id=video_id, title=title, normalized_title=normalize_title(title))


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------

class PlaylistEnumerator:
    """
    Fetches playlist contents through the Data API.

    Args:
        service:         A built `youtube` v3 resource from googleapiclient.
        pacing_interval: Seconds to wait between page requests.
        sleep:           Sleep function, swappable in tests.
    """

    def __init__(
        self,
        service,
        pacing_interval: float = PLAYLIST_PACING_SECS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._service = service
        self._pacing_interval = pacing_interval
        self._sleep = sleep

    def fetch_playlist_videos(self, playlist_id: str) -> list[PlaylistItem]:
        """
        Return every item in the playlist, in API order.

        Raises:
            FetchError: If any page request fails; nothing is returned.
        """
        videos: list[PlaylistItem] = []
        page_token: str | None = None
        page = 0

        while True:
            page += 1
            request = self._service.playlistItems().list(
                part="snippet",
                playlistId=playlist_id,
                maxResults=PLAYLIST_PAGE_SIZE,
                pageToken=page_token,
            )
            try:
                response = request.execute()
            except HttpError as exc:
                raise FetchError(f"playlist {playlist_id} page {page}", str(exc)) from exc

            for item in response.get("items", []):
                snippet = item["snippet"]
                videos.append(PlaylistItem.from_title(
                    snippet["resourceId"]["videoId"],
                    snippet.get("title", ""),
                ))
            logger.info("Playlist %s: page %d, %d videos so far", playlist_id, page, len(videos))

            page_token = response.get("nextPageToken")
            if not page_token:
                break

            self._sleep(self._pacing_interval)

        return videos


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def save_videos_to_csv(filename: str, videos: list[PlaylistItem]) -> None:
    """
    Write a VideoID,Title CSV.  The file is always replaced, never appended.

    Raises:
        ExportError: If the file can't be created or written.
    """
    try:
        with open(filename, "w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            writer.writerow(CSV_HEADER)
            for video in videos:
                writer.writerow([video.video_id, video.title])
    except OSError as exc:
        raise ExportError(filename, str(exc)) from exc


def format_playlist(playlist_id: str, videos: list[PlaylistItem]) -> str:
    lines = [f"Playlist: {playlist_id}", "VideoId: Title"]
    lines.extend(f"{video.video_id}: {video.title}" for video in videos)
    return "\n".join(lines)


def fetch_and_save_playlist(
    enumerator: PlaylistEnumerator,
    playlist_id: str,
    filename: str,
) -> list[PlaylistItem]:
    """Enumerate a playlist and write it to `filename`.  Stops at the first error."""
    videos = enumerator.fetch_playlist_videos(playlist_id)
    save_videos_to_csv(filename, videos)
    logger.info("Playlist %s saved to %s", playlist_id, filename)
    return videos


def fetch_and_print_playlist(
    enumerator: PlaylistEnumerator,
    playlist_id: str,
    out: TextIO | None = None,
) -> list[PlaylistItem]:
    """Enumerate a playlist and print an "id: title" table to `out` (stdout)."""
    videos = enumerator.fetch_playlist_videos(playlist_id)
    click.echo(format_playlist(playlist_id, videos), file=out)
    return videos
